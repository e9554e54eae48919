"""
CSS and JavaScript injected into served documents.
These run in the viewer's browser; the server only emits the text.
"""
import json

from denylist import AD_CONTAINER_IDS, HIDDEN_SERVERS_SELECTOR, NAMED_SCRIPT_SOURCES, PLAYER_FRAME_ID

VIEWPORT_CONTENT = 'width=device-width, initial-scale=1.0'

_AD_ID_LIST = json.dumps(list(AD_CONTAINER_IDS))
_AD_ID_SELECTORS = ',\n'.join('#' + ad_id for ad_id in AD_CONTAINER_IDS)
_NAMED_SCRIPT_QUERY = ', '.join(f'script[src*="{src}"]' for src in NAMED_SCRIPT_SOURCES)
_NAMED_SCRIPT_LIST = json.dumps(list(NAMED_SCRIPT_SOURCES))
_AD_ID_CHECKS = ' ||\n'.join(f"node.id === '{ad_id}'" for ad_id in AD_CONTAINER_IDS)

AD_CONTAINER_CSS = _AD_ID_SELECTORS + ''' {
  display: none !important;
  visibility: hidden !important;
  opacity: 0 !important;
  width: 0 !important;
  height: 0 !important;
  position: static !important;
  pointer-events: none !important;
}
''' + HIDDEN_SERVERS_SELECTOR + ''' {
  display: none !important;
}
.ad_container {
  display: none !important;
}
.mctitle a {
  font-size: inherit !important;
}
'''

# Shared by the frame shell and the full-page guard script
_COMMON_GUARDS = '''
window.aclib = {
  runPop: () => null,
  runInPagePush: () => null,
  runInterstitial: () => null,
  runClickPop: () => null
};

window.open = () => null;
window.alert = () => null;
window.confirm = () => null;
window.prompt = () => null;

Object.defineProperty(window, 'debugger', {
  get: () => undefined,
  set: () => {},
  configurable: false
});

console.debug = () => {};
console.trace = () => {};

function removeSpecificElements() {
  ''' + _AD_ID_LIST + '''.forEach(id => {
    const element = document.getElementById(id);
    if (element) {
      element.remove();
    }
  });

  const serversDiv = document.querySelector(''' + json.dumps(HIDDEN_SERVERS_SELECTOR) + ''');
  if (serversDiv) {
    serversDiv.remove();
  }

  document.querySelectorAll(''' + json.dumps(_NAMED_SCRIPT_QUERY) + ''').forEach(script => script.remove());

  document.querySelectorAll('.mctitle a').forEach(link => {
    link.style.fontSize = '';
  });
}

removeSpecificElements();
'''

# =============================================================================
# FRAME-EXTRACTION SHELL
# =============================================================================

FRAME_SHELL_HEAD = '''<!DOCTYPE html>
<html>
<head>
<meta name="viewport" content="''' + VIEWPORT_CONTENT + '''">
<style>
* {
  margin: 0;
  padding: 0;
  box-sizing: border-box;
}
body {
  background: #000;
  display: flex;
  align-items: center;
  justify-content: center;
  height: 100vh;
  font-family: Arial, sans-serif;
}
#''' + PLAYER_FRAME_ID + ''' {
  width: 100%;
  height: 100%;
  max-width: 100%;
  max-height: 100%;
}
iframe[src*="ads"], iframe[src*="googletagmanager"], iframe[src*="doubleclick"] {
  display: none !important;
}
''' + AD_CONTAINER_CSS + '''</style>
</head>
<body>
'''

FRAME_SHELL_SCRIPT = '''<script>
''' + _COMMON_GUARDS + '''
window.eval = () => undefined;

setTimeout(() => {
  const loading = document.getElementById('loading');
  if (loading) {
    loading.style.display = 'none';
  }
}, 2000);

setInterval(removeSpecificElements, 1000);

document.addEventListener('contextmenu', (e) => {
  e.preventDefault();
});

document.addEventListener('keydown', (e) => {
  if (e.key === 'F12' ||
      (e.ctrlKey && e.shiftKey && e.key === 'I') ||
      (e.ctrlKey && e.shiftKey && e.key === 'C') ||
      (e.ctrlKey && e.shiftKey && e.key === 'J') ||
      (e.ctrlKey && e.key === 'u')) {
    e.preventDefault();
  }
});
</script>
'''

FRAME_SHELL_TAIL = '''
''' + FRAME_SHELL_SCRIPT + '''</body>
</html>
'''


def frame_document(frame_html):
    """Wrap a serialized player container in the minimal clean shell"""
    return FRAME_SHELL_HEAD + frame_html + FRAME_SHELL_TAIL


# =============================================================================
# FULL-PAGE GUARDS
# =============================================================================

PAGE_GUARD_CSS = '''
.ad, .ads, .advertisement, .ad-container, .ad-banner,
[class*="ad-"], [id*="ad-"], [class*="popup"], [class*="modal"],
[class*="overlay"], [class*="banner"], .sponsor, .promo,
div[id*="dontfoid"], div[znid] {
  display: none !important;
  visibility: hidden !important;
  opacity: 0 !important;
  width: 0 !important;
  height: 0 !important;
  pointer-events: none !important;
}
div[style*="z-index: 2147483647"],
div[style*="z-index: 999999"],
div[style*="z-index: 9999999"] {
  display: none !important;
  visibility: hidden !important;
  opacity: 0 !important;
}
''' + AD_CONTAINER_CSS + '''body {
  margin: 0;
  padding: 0;
  background: #000;
  overflow-x: hidden;
}
iframe {
  max-width: 100%;
  border: none;
  pointer-events: auto !important;
}
#the_frame {
  width: 100% !important;
  height: 100% !important;
  max-width: 100% !important;
  max-height: 100% !important;
}
*[style*="position: fixed"] {
  position: static !important;
}
* {
  pointer-events: auto !important;
}
div[style*="background-color: transparent"][style*="position: fixed"] {
  display: none !important;
}
'''

PAGE_GUARD_SCRIPT = _COMMON_GUARDS + '''
window.focus = () => null;
window.blur = () => null;

window.eval = () => undefined;
window.Function = () => () => {};

function isAdTarget(node) {
  if (!node || node.nodeType !== 1) {
    return false;
  }
  const id = node.id || '';
  return (node.classList && (node.classList.contains('ad') || node.classList.contains('popup'))) ||
    id.includes('ad') ||
    id.includes('dontfoid') ||
    node.hasAttribute('znid') ||
    ''' + _AD_ID_CHECKS + ''';
}

['click', 'mousedown'].forEach(type => {
  document.addEventListener(type, function(e) {
    if (isAdTarget(e.target)) {
      e.stopPropagation();
      e.preventDefault();
    }
  }, true);
});

const observer = new MutationObserver(function(mutations) {
  mutations.forEach(function(mutation) {
    mutation.addedNodes.forEach(function(node) {
      if (node.nodeType !== 1) {
        return;
      }
      const id = node.id || '';
      if (node.classList && (
        node.classList.contains('ad') ||
        node.classList.contains('popup') ||
        node.classList.contains('modal') ||
        id.includes('dontfoid') ||
        node.hasAttribute('znid') ||
        ''' + _AD_ID_CHECKS + ''' ||
        (node.classList.contains('servers') && id === 'hidden')
      )) {
        node.remove();
        return;
      }

      const style = node.style;
      if (style && style.zIndex &&
          (style.zIndex === '2147483647' || style.zIndex === '999999' || style.zIndex === '9999999')) {
        node.remove();
        return;
      }

      if (node.tagName === 'SCRIPT' && node.src &&
          ''' + _NAMED_SCRIPT_LIST + '''.some(src => node.src.includes(src))) {
        node.remove();
      }
    });
  });
});

function startObserver() {
  observer.observe(document.body || document.documentElement, {
    childList: true,
    subtree: true
  });
}

if (document.body) {
  startObserver();
} else {
  document.addEventListener('DOMContentLoaded', startObserver);
}

setInterval(() => {
  document.querySelectorAll('div[id*="dontfoid"], div[znid]').forEach(overlay => overlay.remove());
  removeSpecificElements();
}, 100);
'''
