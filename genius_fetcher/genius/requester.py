"""
Rate-limit aware HTTP requester for the Genius API

API requests carry the bearer token and a JSON content type; public page
fetches carry neither but share the same retry loop. Throttled
responses (429, or 1015 from the edge network in front of genius.com) are
retried with the same request after waiting for the server's Retry-After
hint, or a default delay when the hint is missing or not an integer. There
is no retry limit: the loop ends on the first response that is not a
throttle, or when the transport itself fails.

Waits can be interrupted with a CancellationToken passed into execute();
the token is also checked before each attempt.
"""

import json
import threading
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import requests

from ..config.settings import get_settings
from ..utils.logger import get_logger
from ..exceptions import (
    GeniusAPIError,
    GeniusDecodeError,
    GeniusTransportError,
    OperationCancelledError,
)

THROTTLE_STATUSES = (429, 1015)
DEFAULT_RETRY_DELAY = 5


class CancellationToken:
    """
    Cooperative cancellation signal for backoff waits and page loops

    Example:
        token = CancellationToken()
        threading.Timer(30, token.cancel).start()
        songs = client.get_artist_songs(1177, cancel=token)
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """Block up to seconds; returns True if cancelled meanwhile"""
        return self._event.wait(seconds)

    def raise_if_cancelled(self, context: str = "") -> None:
        if self.cancelled:
            raise OperationCancelledError(
                f"Operation cancelled{': ' + context if context else ''}",
                details={'context': context}
            )


@dataclass(frozen=True)
class RequestDescriptor:
    """One logical API call, replayed unchanged on every retry"""
    method: str
    url: str
    params: Mapping[str, Any] = field(default_factory=dict)
    token: Optional[str] = None

    def __post_init__(self):
        # Read-only copy, so no caller can change a request between attempts
        object.__setattr__(self, 'params', MappingProxyType(dict(self.params)))


def retry_duration(response: requests.Response, default: float = DEFAULT_RETRY_DELAY) -> float:
    """
    Seconds to wait before retrying a throttled response

    Args:
        response: The 429/1015 response
        default: Wait used when Retry-After is absent or not an integer

    Returns:
        Wait in seconds
    """
    raw = response.headers.get('Retry-After')
    if not raw:
        return default
    try:
        seconds = int(raw.strip())
    except ValueError:
        return default
    # A negative hint means retry at once
    return max(0, seconds)


class GeniusRequester:
    """
    Executes requests against the Genius API with transparent throttle retry

    Attributes:
        session: Shared requests.Session
        timeout: Per-attempt timeout in seconds
        default_retry_delay: Wait used when a throttle carries no usable hint
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        default_retry_delay: Optional[float] = None
    ):
        self.settings = get_settings()
        self.logger = get_logger(__name__)

        self.timeout = timeout if timeout is not None else self.settings.network.request_timeout
        if default_retry_delay is None:
            default_retry_delay = self.settings.network.default_retry_delay
        self.default_retry_delay = default_retry_delay

        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': self.settings.network.user_agent})

    def execute(self, request: RequestDescriptor, cancel: Optional[CancellationToken] = None) -> bytes:
        """
        Execute one request, retrying while the server throttles it

        Args:
            request: The call to perform; sent verbatim on every attempt
            cancel: Optional token interrupting the backoff wait

        Returns:
            Raw response body of the 200 response

        Raises:
            GeniusTransportError: Connection, DNS, TLS or timeout failure
            GeniusAPIError: Any status other than 200/429/1015
            OperationCancelledError: The token was cancelled
        """
        headers = {}
        if request.token is not None:
            headers['Authorization'] = f"Bearer {request.token}"
            headers['Content-Type'] = 'application/json'

        attempt = 0
        while True:
            attempt += 1
            if cancel is not None:
                cancel.raise_if_cancelled(request.url)

            self.logger.debug(f"{request.method} {request.url} params={dict(request.params)} (attempt {attempt})")
            try:
                response = self.session.request(
                    request.method,
                    request.url,
                    params=dict(request.params) or None,
                    headers=headers,
                    timeout=self.timeout
                )
            except requests.exceptions.RequestException as e:
                raise GeniusTransportError(
                    f"Request to {request.url} failed: {e}",
                    details={'url': request.url, 'params': dict(request.params)}
                ) from e

            if response.status_code in THROTTLE_STATUSES:
                delay = retry_duration(response, self.default_retry_delay)
                response.close()
                self.logger.warning(
                    f"Rate limited ({response.status_code}) on {request.url}, retrying in {delay}s"
                )
                self._wait(delay, cancel, request.url)
                continue

            body = response.content
            if response.status_code != 200:
                text = body.decode(response.encoding or 'utf-8', errors='replace')
                raise GeniusAPIError(
                    text,
                    status_code=response.status_code,
                    body=text,
                    url=request.url,
                    details={'params': dict(request.params)}
                )

            return body

    def execute_json(self, request: RequestDescriptor, cancel: Optional[CancellationToken] = None) -> Dict[str, Any]:
        """
        Execute a request and decode its JSON envelope

        Raises:
            GeniusDecodeError: If the body is not a JSON object
        """
        body = self.execute(request, cancel)
        try:
            data = json.loads(body)
        except ValueError as e:
            raise GeniusDecodeError(
                f"Invalid JSON from {request.url}: {e}",
                details={'url': request.url}
            ) from e

        if not isinstance(data, dict):
            raise GeniusDecodeError(
                f"Unexpected JSON envelope from {request.url}: {type(data).__name__}",
                details={'url': request.url}
            )
        return data

    def fetch_page(self, url: str, cancel: Optional[CancellationToken] = None) -> bytes:
        """Unauthenticated GET of a public page (song pages for lyrics)"""
        return self.execute(RequestDescriptor('GET', url), cancel)

    def close(self) -> None:
        self.session.close()

    def _wait(self, seconds: float, cancel: Optional[CancellationToken], url: str) -> None:
        if cancel is None:
            time.sleep(seconds)
            return

        if cancel.wait(seconds):
            raise OperationCancelledError(
                f"Operation cancelled while waiting to retry {url}",
                details={'url': url}
            )
