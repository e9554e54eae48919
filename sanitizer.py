"""
HTML sanitization pipeline for embed pages.

parse -> detect player frame -> (frame extraction | full-page cleaning) -> serialize

Every pass takes the parsed document plus the upstream URL and returns how many
nodes it touched. The pipeline is a pure function of the input text and the
static denylist, so the same bytes always produce the same output.
"""
import logging
import re
from collections import namedtuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup

import denylist
from guard_scripts import PAGE_GUARD_CSS, PAGE_GUARD_SCRIPT, VIEWPORT_CONTENT, frame_document
from proxy_errors import SanitizeError

logger = logging.getLogger(__name__)

FRAME_BRANCH = 'frame'
FULL_PAGE_BRANCH = 'full-page'

FRAME_CSP = "script-src 'unsafe-inline'; object-src 'none'; frame-ancestors *;"
FULL_PAGE_CSP = "script-src 'self' 'unsafe-inline'; object-src 'none'; frame-ancestors *;"

SanitizedPage = namedtuple('SanitizedPage', ['html', 'branch', 'csp'])

_FONT_SIZE_DECL = re.compile(r'font-size\s*:[^;]*;?\s*', re.IGNORECASE)


# =============================================================================
# HELPERS
# =============================================================================

def parse_inline_style(style):
    """Parse a style attribute into {property: value}, lowercased and whitespace-trimmed"""
    declarations = {}
    for chunk in (style or '').split(';'):
        prop, sep, value = chunk.partition(':')
        if not sep:
            continue
        value = re.sub(r'\s*!important\s*$', '', value.strip(), flags=re.IGNORECASE)
        declarations[prop.strip().lower()] = value.strip().lower()
    return declarations


def is_click_overlay(tag):
    """Fixed, transparent, top-most div: the signature of an invisible click interceptor"""
    if tag.name != 'div':
        return False
    style = parse_inline_style(tag.get('style'))
    background = style.get('background-color') or style.get('background')
    return (
        style.get('position') == 'fixed'
        and style.get('z-index') == denylist.OVERLAY_Z_INDEX
        and background in denylist.TRANSPARENT_BACKGROUNDS
    )


def is_high_z_overlay(tag):
    if tag.name != 'div':
        return False
    # Substring match, so values like 99999999 count too
    z_index = parse_inline_style(tag.get('style')).get('z-index') or ''
    return any(sentinel in z_index for sentinel in denylist.SENTINEL_Z_INDEXES)


def _remove(tag):
    """Decompose a tag unless an earlier removal already took it with its parent"""
    if tag.decomposed:
        return 0
    tag.decompose()
    return 1


def _ensure_head(soup):
    if soup.head is not None:
        return soup.head
    head = soup.new_tag('head')
    if soup.html is not None:
        soup.html.insert(0, head)
    else:
        soup.insert(0, head)
    return head


# =============================================================================
# FULL-PAGE PASSES
# =============================================================================

def remove_denylisted(soup, base_url):
    """Drop everything matching the static selectors or the overlay signature"""
    removed = 0
    for selector in denylist.REMOVAL_SELECTORS:
        for tag in soup.select(selector):
            removed += _remove(tag)

    for tag in soup.find_all('div'):
        if tag.decomposed:
            continue
        if is_click_overlay(tag) or is_high_z_overlay(tag):
            removed += _remove(tag)
    return removed


def strip_ad_css_rules(soup, base_url):
    """Remove the origin's own rules for its ad containers from <style> blocks"""
    stripped = 0
    for style in soup.find_all('style'):
        css = style.string
        if not css:
            continue
        cleaned = css
        for pattern in denylist.CSS_RULE_PATTERNS:
            cleaned, count = pattern.subn('', cleaned)
            stripped += count
        if cleaned != css:
            style.string = cleaned
    return stripped


def remove_named_scripts(soup, base_url):
    removed = 0
    for src in denylist.NAMED_SCRIPT_SOURCES:
        for tag in soup.select(f'script[src*="{src}"]'):
            removed += _remove(tag)
    return removed


def remove_named_containers(soup, base_url):
    """Remove the hidden servers list and fixed-id ad containers, reset .mctitle link sizing"""
    removed = 0
    for tag in soup.select(denylist.HIDDEN_SERVERS_SELECTOR):
        removed += _remove(tag)
    for ad_id in denylist.AD_CONTAINER_IDS:
        for tag in soup.find_all(id=ad_id):
            removed += _remove(tag)

    for link in soup.select('.mctitle a[style]'):
        style = _FONT_SIZE_DECL.sub('', link['style']).strip()
        if style:
            link['style'] = style
        else:
            del link['style']
    return removed


def strip_event_handlers(soup, base_url):
    """Strip inline handlers everywhere and defuse javascript: links"""
    touched = 0
    for tag in soup.find_all(True):
        for attr in denylist.EVENT_HANDLER_ATTRS:
            if attr in tag.attrs:
                del tag[attr]
                touched += 1

    for anchor in soup.find_all('a', href=True):
        if anchor['href'].strip().lower().startswith('javascript:'):
            del anchor['href']
            touched += 1
    return touched


def remove_suspicious_scripts(soup, base_url):
    removed = 0
    for script in soup.find_all('script'):
        if script.decomposed:
            continue
        content = script.string or ''
        src = script.get('src') or ''
        if any(keyword in content for keyword in denylist.SUSPICIOUS_SCRIPT_KEYWORDS):
            removed += _remove(script)
        elif any(host in src for host in denylist.SUSPICIOUS_SCRIPT_SOURCES):
            removed += _remove(script)
    return removed


def absolutize_urls(soup, base_url):
    """Rewrite root-relative href/src against the upstream origin; //host URLs stay as they are"""
    rewritten = 0
    for attr in denylist.URL_ATTRS:
        for tag in soup.find_all(attrs={attr: True}):
            value = tag[attr]
            if value.startswith('/') and not value.startswith('//'):
                tag[attr] = urljoin(base_url, value)
                rewritten += 1
    return rewritten


def inject_guards(soup, base_url):
    """Append guard CSS and script to <head>, prepend a viewport meta when missing"""
    head = _ensure_head(soup)

    style = soup.new_tag('style')
    style.string = PAGE_GUARD_CSS
    head.append(style)

    script = soup.new_tag('script')
    script.string = PAGE_GUARD_SCRIPT
    head.append(script)

    injected = 2
    if soup.find('meta', attrs={'name': 'viewport'}) is None:
        head.insert(0, soup.new_tag('meta', attrs={'name': 'viewport', 'content': VIEWPORT_CONTENT}))
        injected += 1
    return injected


CLEANING_PASSES = (
    remove_denylisted,
    strip_ad_css_rules,
    remove_named_scripts,
    remove_named_containers,
    strip_event_handlers,
    remove_suspicious_scripts,
    absolutize_urls,
    inject_guards,
)


# =============================================================================
# BRANCHES
# =============================================================================

def find_player_frame(soup):
    return soup.find(id=denylist.PLAYER_FRAME_ID)


def extract_frame(frame):
    """Serve only the player container inside a fresh shell"""
    return frame_document(str(frame))


def clean_full_page(soup, base_url):
    total = 0
    for cleaning_pass in CLEANING_PASSES:
        count = cleaning_pass(soup, base_url)
        logger.debug("%s: %d node(s)", cleaning_pass.__name__, count)
        total += count
    logger.info("Cleaned full page: %d node(s) removed or rewritten", total)
    return str(soup)


def sanitize(html, base_url):
    """Turn an untrusted embed page into a SanitizedPage.

    Raises SanitizeError if the body cannot be parsed or transformed.
    """
    if not isinstance(html, str):
        raise SanitizeError(f"Expected HTML text, got {type(html).__name__}")

    try:
        soup = BeautifulSoup(html, 'html.parser')

        frame = find_player_frame(soup)
        if frame is not None:
            logger.info("Found %s element, serving clean frame content", denylist.PLAYER_FRAME_ID)
            return SanitizedPage(extract_frame(frame), FRAME_BRANCH, FRAME_CSP)

        logger.info("No %s element found, cleaning full page", denylist.PLAYER_FRAME_ID)
        return SanitizedPage(clean_full_page(soup, base_url), FULL_PAGE_BRANCH, FULL_PAGE_CSP)
    except SanitizeError:
        raise
    except Exception as e:
        logger.exception("Failed to sanitize %s", base_url)
        raise SanitizeError(f"Could not sanitize upstream HTML: {e}") from e
