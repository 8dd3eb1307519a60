"""Error taxonomy for chat backends.

Messages carry status codes and upstream bodies for diagnostics, never
credentials or bearer tokens.
"""


class GigaChatError(Exception):
    """Base class for all chat backend failures."""


class ConfigurationError(GigaChatError):
    """Required configuration is missing or invalid. Not retryable."""


class NetworkError(GigaChatError):
    """Transport failure: DNS, connect, TLS handshake or timeout."""


class ValidationError(GigaChatError):
    """Malformed caller input, rejected before any backend call."""


class UpstreamStatusError(GigaChatError):
    """Upstream answered with a non-success status."""

    prefix = "Upstream request failed"

    def __init__(self, status_code: int, status_text: str = "", body: str = ""):
        self.status_code = status_code
        self.status_text = status_text
        self.body = body
        message = f"{self.prefix}: {status_code} {status_text}".rstrip()
        if body:
            message = f"{message} - {body}"
        super().__init__(message)


class AuthenticationError(UpstreamStatusError):
    """OAuth token endpoint rejected the credentials or returned junk."""

    prefix = "Authentication failed"


class RequestError(UpstreamStatusError):
    """Chat completions endpoint failed after successful authentication."""

    prefix = "Chat request failed"
