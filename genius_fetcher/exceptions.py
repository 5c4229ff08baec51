"""
Exception classes for Genius-Fetcher.

Every failure the client can surface has its own class so callers can tell
a dead connection from an upstream error, a malformed envelope, a missing
resource or a song page whose lyric block could not be found.

Exception Hierarchy:
    GeniusError (base)
        GeniusTransportError - Connection, TLS, DNS or timeout failure
        GeniusAPIError - Non-200 response that is not a throttle
        GeniusDecodeError - Response body is not the expected JSON
        ResourceNotFoundError - Envelope lacks the requested resource
        OperationCancelledError - Cancellation token fired mid-operation
        ConfigError - Invalid or incomplete configuration
        LyricsError - Lyrics extraction issues
            LyricsParseError - Markup could not be parsed
            LyricsContainerNotFoundError - No lyric container in the page

Rate-limited responses (429/1015) never appear here: the requester retries
them until the server lets the request through.
"""

from typing import Any, Optional


class GeniusError(Exception):
    """
    Base exception for all Genius-Fetcher errors.

    Attributes:
        message: Human-readable error description.
        details: Context for diagnosing the failure. Common keys are
                 'url', 'endpoint', 'resource', 'id' and 'status_code'.

    Example:
        try:
            client.get_song(378195)
        except GeniusError as e:
            logger.error(f"Request failed: {e.message}")
            logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: Optional[dict] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class GeniusTransportError(GeniusError):
    """
    Raised when the HTTP request itself could not be completed.

    Covers connection refusal, DNS resolution, TLS handshake and timeouts.
    These are never retried; the underlying ``requests`` exception is chained
    as ``__cause__``.
    """
    pass


class GeniusAPIError(GeniusError):
    """
    Raised when the API answers with a status other than 200, 429 or 1015.

    The raw response body becomes the message, since Genius error payloads
    are readable JSON or plain text.

    Example:
        raise GeniusAPIError(
            '{"meta":{"status":404,"message":"Not found"}}',
            status_code=404,
            body='{"meta":{"status":404,"message":"Not found"}}',
            url='https://api.genius.com/songs/0'
        )
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        body: str = "",
        url: str = "",
        details: Optional[dict] = None
    ) -> None:
        details = dict(details or {})
        details.setdefault('status_code', status_code)
        details.setdefault('url', url)
        super().__init__(message, details)
        self.status_code = status_code
        self.body = body
        self.url = url


class GeniusDecodeError(GeniusError):
    """Raised when a response body is not valid JSON."""
    pass


class ResourceNotFoundError(GeniusError):
    """
    Raised when a decoded envelope does not contain the requested resource.

    Attributes:
        resource: Resource kind ('song', 'artist', 'album', ...).
        identifier: Id or search term that was looked up.
    """

    def __init__(
        self,
        resource: str,
        identifier: Any,
        message: Optional[str] = None,
        details: Optional[dict] = None
    ) -> None:
        details = dict(details or {})
        details.setdefault('resource', resource)
        details.setdefault('id', identifier)
        super().__init__(message or f"No {resource} found for: {identifier}", details)
        self.resource = resource
        self.identifier = identifier


class OperationCancelledError(GeniusError):
    """Raised when a CancellationToken is set during a request or page loop."""
    pass


class ConfigError(GeniusError):
    """
    Raised when the configuration cannot support the requested operation.

    Example:
        raise ConfigError(
            "Genius access token not configured",
            details={'env_var': 'GENIUS_ACCESS_TOKEN'}
        )
    """
    pass


class LyricsError(GeniusError):
    """
    Base class for lyric extraction failures.

    Extraction depends on the markup of the public song page, so these
    errors usually mean the page layout changed or the URL is not a song.
    """
    pass


class LyricsParseError(LyricsError):
    """Raised when the HTML parser fails on the fetched page."""
    pass


class LyricsContainerNotFoundError(LyricsError):
    """Raised when no lyric container element exists in the page markup."""
    pass
