"""
Embed providers - request validation and upstream URL resolution
"""
from collections import namedtuple
from types import MappingProxyType
from urllib.parse import quote, urlencode

from proxy_errors import MissingParameterError, UnsupportedProviderError

DEFAULT_MEDIA_TYPE = 'movie'

ProxyRequest = namedtuple('ProxyRequest', ['provider', 'requested', 'id', 'tmdb', 'type'])


def _vidsrc_to_url(req):
    return 'https://vidsrc.to/embed/{}/{}'.format(
        quote(req.type, safe=''), quote(req.id, safe='')
    )


def _vidsrc_me_url(req):
    query = urlencode({'tmdb': req.tmdb or req.id})
    return 'https://vidsrc.me/embed/{}?{}'.format(quote(req.type, safe=''), query)


# Canonical provider name -> URL builder
PROVIDERS = MappingProxyType({
    'vidsrc-to': _vidsrc_to_url,
    'vidsrc-me': _vidsrc_me_url,
})

# Backward-compatible names
ALIASES = MappingProxyType({
    'vidsrc': 'vidsrc-to',
})

SUPPORTED_PROVIDERS = ('vidsrc', 'vidsrc-to', 'vidsrc-me')


def supported_providers():
    """Provider names accepted in the /proxy/<provider> path"""
    return list(SUPPORTED_PROVIDERS)


def canonical_provider(name):
    """Map an accepted provider name to its canonical form, or None"""
    name = ALIASES.get(name, name)
    return name if name in PROVIDERS else None


def parse_request(provider, args):
    """Validate the path segment and query args into a ProxyRequest.

    The id check runs first so a missing id is reported the same way for every
    provider, known or not.
    """
    media_id = args.get('id')
    if not media_id:
        raise MissingParameterError()

    canonical = canonical_provider(provider)
    if canonical is None:
        raise UnsupportedProviderError(provider, SUPPORTED_PROVIDERS)

    return ProxyRequest(
        provider=canonical,
        requested=provider,
        id=media_id,
        tmdb=args.get('tmdb') or None,
        type=args.get('type') or DEFAULT_MEDIA_TYPE,
    )


def resolve_target(req):
    """Build the upstream embed URL for a validated request"""
    return PROVIDERS[req.provider](req)
