"""
Single-shot HTML fetcher.

One GET per call: redirects followed, no retries, bounded by a total
deadline. Transport failures are translated into pipeline error kinds
here, so no requests/urllib3 vocabulary leaks past this module.
"""

import socket
import threading
import time
from dataclasses import dataclass
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.exceptions import NameResolutionError
from urllib3.exceptions import ReadTimeoutError

from . import config
from .errors import (
    BadResponseError,
    FetchTimeoutError,
    HostNotFoundError,
    PipelineError,
    TransportError,
)

CHUNK_SIZE = 16 * 1024
TIMEOUT_MESSAGE = 'Timeout while fetching the URL'

DNS_FAILURE_CAUSES = (socket.gaierror, NameResolutionError)
# requests re-raises a mid-stream read timeout as a plain ConnectionError
READ_TIMEOUT_CAUSES = (ReadTimeoutError,)


@dataclass(frozen=True)
class FetchResult:
    body: str
    status_code: int
    final_url: str


def _caused_by(exc: BaseException, causes: tuple) -> bool:
    """Walk the wrapped-exception chain looking for any of the given causes."""
    seen = set()
    pending = [exc]

    while pending:
        current = pending.pop()
        if not isinstance(current, BaseException) or id(current) in seen:
            continue
        seen.add(id(current))

        if isinstance(current, causes):
            return True

        # requests wraps urllib3's MaxRetryError, which keeps the cause in .reason
        pending.append(getattr(current, 'reason', None))
        pending.append(current.__cause__)
        pending.append(current.__context__)
        pending.extend(arg for arg in current.args if isinstance(arg, BaseException))

    return False


# Ordered: first matching row wins
ERROR_TRANSLATIONS = (
    (lambda e: isinstance(e, requests.exceptions.Timeout) or _caused_by(e, READ_TIMEOUT_CAUSES),
     FetchTimeoutError, TIMEOUT_MESSAGE),
    (lambda e: isinstance(e, requests.exceptions.ConnectionError) and _caused_by(e, DNS_FAILURE_CAUSES),
     HostNotFoundError, 'Host not found'),
    (lambda e: isinstance(e, requests.exceptions.RequestException),
     TransportError, None),
)


def translate_error(exc: Exception) -> PipelineError:
    """Map a transport exception to its pipeline error. Unknown failures become TransportError."""
    for matches, error_class, message in ERROR_TRANSLATIONS:
        if matches(exc):
            return error_class(message or str(exc))
    return TransportError(str(exc))


def _abort(response: requests.Response):
    """Shut down the socket under a streamed response, waking any blocked read."""
    connection = getattr(response.raw, 'connection', None)
    sock = getattr(connection, 'sock', None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        # Peer already closed it
        pass


class DeadlineSession(requests.Session):
    """
    Session where the first request and every redirect hop share one
    total deadline.

    Each send() gets only the time that is left as its timeout. Once the
    deadline passes, a watchdog thread shuts down the socket of the live
    response so a server trickling bytes cannot keep the read going.
    """

    def __init__(self, deadline: float):
        super().__init__()
        self.deadline = deadline
        self.expired = False
        self._response = None
        self._lock = threading.Lock()
        self._watchdog = None
        self.hooks['response'].append(self._track)

    def remaining(self) -> float:
        return self.deadline - time.monotonic()

    def send(self, request, **kwargs):
        remaining = self.remaining()
        if self.expired or remaining <= 0:
            raise FetchTimeoutError(TIMEOUT_MESSAGE)
        kwargs['timeout'] = remaining
        return super().send(request, **kwargs)

    def _track(self, response, **kwargs):
        # Runs per hop before requests reads a redirect body
        with self._lock:
            self._response = response
            expired = self.expired
        if expired:
            _abort(response)

    def start_watchdog(self):
        self._watchdog = threading.Timer(max(self.remaining(), 0), self.expire)
        self._watchdog.daemon = True
        self._watchdog.start()

    def expire(self):
        with self._lock:
            self.expired = True
            response = self._response
        if response is not None:
            _abort(response)

    def close(self):
        if self._watchdog is not None:
            self._watchdog.cancel()
        super().close()


def _build_session(deadline: float, user_agent: Optional[str] = None) -> DeadlineSession:
    session = DeadlineSession(deadline)
    adapter = HTTPAdapter(max_retries=0)
    session.mount('http://', adapter)
    session.mount('https://', adapter)
    session.headers.update({
        'User-Agent': user_agent or config.USER_AGENT,
        'Accept': config.ACCEPT,
    })
    return session


def _read_body(response: requests.Response, deadline: float) -> bytes:
    """Read the streamed body, aborting once the total deadline has passed."""
    chunks = []
    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
        if time.monotonic() > deadline:
            raise FetchTimeoutError(TIMEOUT_MESSAGE)
        if chunk:
            chunks.append(chunk)
    return b''.join(chunks)


def _decode_body(response: requests.Response, raw: bytes) -> str:
    content_type = response.headers.get('Content-Type', '')
    encoding = response.encoding if 'charset' in content_type.lower() else None
    try:
        return raw.decode(encoding or 'utf-8', errors='replace')
    except LookupError:
        # Unknown charset label in the header
        return raw.decode('utf-8', errors='replace')


def fetch_html(url: str, timeout_ms: Optional[int] = None, user_agent: Optional[str] = None) -> FetchResult:
    """
    Fetch a page once and return its body and final status.

    Any 2xx/3xx response is returned regardless of content type. The
    timeout covers the whole call: connect, every redirect hop and the
    body read.

    Raises:
        FetchTimeoutError: deadline elapsed before the body was received
        HostNotFoundError: DNS lookup failed
        BadResponseError: final status was 4xx/5xx
        TransportError: any other network failure (original message kept)
    """
    if timeout_ms is None:
        timeout_ms = config.FETCH_TIMEOUT_MS
    deadline = time.monotonic() + timeout_ms / 1000

    with _build_session(deadline, user_agent) as session:
        session.start_watchdog()
        try:
            response = session.get(url, allow_redirects=True, stream=True)
        except requests.exceptions.RequestException as e:
            if session.expired:
                raise FetchTimeoutError(TIMEOUT_MESSAGE) from e
            raise translate_error(e) from e

        with response:
            if response.status_code >= 400:
                reason = response.reason or 'Error'
                raise BadResponseError(f'HTTP error: {response.status_code} {reason}',
                                       status_code=response.status_code)
            try:
                raw = _read_body(response, deadline)
            except requests.exceptions.RequestException as e:
                if session.expired:
                    raise FetchTimeoutError(TIMEOUT_MESSAGE) from e
                raise translate_error(e) from e
            except (OSError, ValueError, AttributeError) as e:
                # Raised from the socket the watchdog shut down mid-read
                if session.expired:
                    raise FetchTimeoutError(TIMEOUT_MESSAGE) from e
                raise

            if session.expired:
                # The shutdown can surface as a clean EOF with a short body
                raise FetchTimeoutError(TIMEOUT_MESSAGE)

            return FetchResult(
                body=_decode_body(response, raw),
                status_code=response.status_code,
                final_url=response.url,
            )
