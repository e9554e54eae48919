"""
Error taxonomy for the embed proxy.
Every error knows its HTTP status and how to render itself as a JSON body.
"""


class ProxyError(Exception):
    """Base class for errors surfaced to the client as JSON"""
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message}


# =============================================================================
# CLIENT INPUT ERRORS (400)
# =============================================================================

class MissingParameterError(ProxyError):
    status_code = 400

    def __init__(self, message="Missing movie/show ID"):
        super().__init__(message)


class UnsupportedProviderError(ProxyError):
    status_code = 400

    def __init__(self, provider, supported):
        quoted = [f"'{name}'" for name in supported]
        if len(quoted) > 1:
            listing = ', '.join(quoted[:-1]) + ', or ' + quoted[-1]
        else:
            listing = ''.join(quoted)
        super().__init__(f"Unsupported provider. Use {listing}")
        self.provider = provider
        self.supported = list(supported)

    def to_dict(self):
        body = super().to_dict()
        body['supportedProviders'] = self.supported
        return body


# =============================================================================
# UPSTREAM / PIPELINE ERRORS (500)
# =============================================================================

class UpstreamError(ProxyError):
    """Failure after the request was accepted; reported with the target URL"""
    status_code = 500
    summary = "Failed to fetch or clean video content"

    def __init__(self, message, provider=None, target_url=None):
        super().__init__(message)
        self.provider = provider
        self.target_url = target_url

    def to_dict(self):
        return {
            'error': self.summary,
            'details': self.message,
            'provider': self.provider,
            'targetUrl': self.target_url,
        }


class FetchTimeoutError(UpstreamError):
    pass


class FetchFailedError(UpstreamError):
    def __init__(self, message, status_code=None, provider=None, target_url=None):
        super().__init__(message, provider=provider, target_url=target_url)
        # Upstream status, distinct from the class-level HTTP status we answer with
        self.upstream_status = status_code


class SanitizeError(UpstreamError):
    pass
