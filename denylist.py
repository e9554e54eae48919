"""
Static denylist for embed pages.
Everything here is built once at import and never mutated.
"""
import re

# Container wrapping the real video player; its presence selects the frame-extraction path
PLAYER_FRAME_ID = 'player_iframe'

# Ad containers the embed origin ships with fixed ids
AD_CONTAINER_IDS = ('AdWidgetContainer', 'ad720', 'onexbet')

# The "servers" list the embed origin hides and we drop entirely
HIDDEN_SERVERS_SELECTOR = 'div.servers#hidden'

# Analytics / ad loader scripts removed by name
NAMED_SCRIPT_SOURCES = (
    'histats.com',
    'f59d610a61063c7ef3ccdc1fd40d2ae6.js',
)

# =============================================================================
# ELEMENT SELECTORS
# =============================================================================

AD_SCRIPT_HOSTS = (
    'ads',
    'adsystem',
    'doubleclick',
    'googlesyndication',
    'googletagmanager',
    'amazon-adsystem',
    'popads',
    'popcash',
    'propellerads',
    'adnxs',
    'adskeeper',
    'mgid',
    'outbrain',
    'taboola',
) + NAMED_SCRIPT_SOURCES

AD_IFRAME_HOSTS = ('ads', 'googletagmanager', 'doubleclick')

REMOVAL_SELECTORS = (
    tuple(f'script[src*="{host}"]' for host in AD_SCRIPT_HOSTS)
    + tuple(f'iframe[src*="{host}"]' for host in AD_IFRAME_HOSTS)
    + (
        # Element-based ads
        'div[class*="ad"]',
        'div[id*="ad"]',
        'div[class*="banner"]',
        'div[id*="banner"]',
        '.advertisement',
        '.ad-container',
        '.popup',
        '.modal',
        '.overlay',
        '[data-ad-slot]',

        # Links and buttons
        'a[href*="sponsor"]',
        'a[href*="promo"]',
        'a[href*="affiliate"]',

        # Overlay blockers
        'div[id*="dontfoid"]',
        'div[znid]',
        'div[style*="position: fixed"][style*="z-index: 2147483647"]',
        'div[style*="position: fixed"][style*="background-color: transparent"]',
        'div[style*="position: fixed"][style*="top: 0"][style*="left: 0"]',
        'div[style*="z-index: 2147483647"]',
        'div[style*="z-index: 999999"]',
        'div[style*="z-index: 9999999"]',

        # Click interceptors
        'div[onclick*="open"]',
        'div[onclick*="popup"]',
        'a[onclick*="open"]',
        'a[onclick*="popup"]',
        '[onmousedown*="open"]',
        '[onmouseup*="open"]',
        '[onclick*="aclib"]',
        '[onclick*="popunder"]',
    )
)

# =============================================================================
# OVERLAY SIGNATURE
# =============================================================================

# z-index values used by invisible click-interceptor overlays
OVERLAY_Z_INDEX = '2147483647'
SENTINEL_Z_INDEXES = frozenset({'2147483647', '999999', '9999999'})
TRANSPARENT_BACKGROUNDS = frozenset({'transparent', 'rgba(0,0,0,0)', 'rgba(0, 0, 0, 0)'})

# =============================================================================
# STYLESHEET RULES
# =============================================================================

# Rules the embed origin uses to style its own ad containers
CSS_RULE_PATTERNS = tuple(re.compile(pattern) for pattern in (
    r'\.mctitle\s+a\s*\{[^}]*\}',
    r'#AdWidgetContainer\s*\{[^}]*\}',
    r'#ad720\s*\{[^}]*\}',
    r'#ad720\s+\.ad_container\s*\{[^}]*\}',
    r'#ad720\s+\.ad_container\s+img\s*\{[^}]*\}',
    r'#ad720\s+\.ad_container\s+#close\s*\{[^}]*\}',
    r'#ad720\s+\.ad_container\s+#close:hover\s*\{[^}]*\}',
    r'#onexbet\s*\{[^}]*\}',
    r'#onexbet\s+img\s*\{[^}]*\}',
))

# =============================================================================
# SCRIPTS & ATTRIBUTES
# =============================================================================

EVENT_HANDLER_ATTRS = (
    'onclick',
    'onmousedown',
    'onmouseup',
    'onfocus',
    'onblur',
    'oncontextmenu',
)

SUSPICIOUS_SCRIPT_KEYWORDS = (
    'debugger',
    'aclib.runPop',
    'aclib.runInPagePush',
    'popunder',
    'popup',
    'advertisement',
    'adsystem',
    'googletag',
    'pbjs',
    'window.open',
    'dontfoid',
    'znid',
)

SUSPICIOUS_SCRIPT_SOURCES = (
    'popads',
    'popcash',
    'propellerads',
) + NAMED_SCRIPT_SOURCES

URL_ATTRS = ('href', 'src')
