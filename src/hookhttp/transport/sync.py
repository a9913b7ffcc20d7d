"""Synchronous transport session backed by requests."""

import logging
from typing import Optional

import requests
import urllib3

from ..errors import TransportFailure
from ..models.config import TransportOptions
from ..models.message import Request
from .protocols import RawExchange
from .raw import Hop, render_exchange, request_headers, request_payload

logger = logging.getLogger(__name__)


def failure_from_requests(exc: requests.RequestException) -> TransportFailure:
    """Map a requests exception to a TransportFailure code."""
    # Order matters: SSLError and ConnectTimeout are ConnectionError subclasses
    if isinstance(exc, requests.exceptions.TooManyRedirects):
        code = "too_many_redirects"
    elif isinstance(exc, requests.exceptions.SSLError):
        code = "tls_error"
    elif isinstance(exc, requests.exceptions.Timeout):
        code = "timeout"
    elif isinstance(exc, requests.exceptions.ConnectionError):
        code = "connect_error"
    elif isinstance(
        exc,
        (
            requests.exceptions.InvalidURL,
            requests.exceptions.InvalidSchema,
            requests.exceptions.MissingSchema,
            requests.exceptions.URLRequired,
        ),
    ):
        code = "invalid_request"
    else:
        code = "request_error"
    return TransportFailure(code, str(exc))


def failure_from_urllib3(exc: urllib3.exceptions.HTTPError) -> TransportFailure:
    """Map an error raised while reading the body off the connection."""
    if isinstance(exc, urllib3.exceptions.ReadTimeoutError):
        code = "timeout"
    elif isinstance(exc, urllib3.exceptions.ProtocolError):
        code = "connect_error"
    else:
        code = "request_error"
    return TransportFailure(code, str(exc) or exc.__class__.__name__)


def _hop_from_response(response: requests.Response) -> Hop:
    raw_version = getattr(response.raw, "version", 11)
    version = "HTTP/1.0" if raw_version == 10 else "HTTP/1.1"
    return Hop(
        status=response.status_code,
        reason=response.reason or "",
        headers=list(response.headers.items()),
        version=version,
    )


class RequestsSession:
    """
    TransportSession wrapping one ``requests.Session``.

    The underlying session is created lazily and kept for the lifetime of
    this object, so keep-alive connections are reused across calls.
    """

    def __init__(self, session: Optional[requests.Session] = None, trust_env: bool = True) -> None:
        """
        Initialize the session wrapper.

        Args:
            session: Existing requests session to use instead of creating one
            trust_env: Let requests read proxy and netrc settings from the environment
        """
        self._session = session
        self._trust_env = trust_env

    @property
    def session(self) -> requests.Session:
        """Get or create the underlying requests session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.trust_env = self._trust_env
        return self._session

    def execute(self, request: Request, options: TransportOptions) -> RawExchange:
        """
        Perform one blocking exchange.

        Args:
            request: Request to send
            options: Option set for this call

        Returns:
            RawExchange covering every redirect hop

        Raises:
            TransportFailure: On network, TLS, timeout or redirect-limit errors
        """
        session = self.session
        session.max_redirects = options.max_redirects

        logger.debug(f"{request.method} {request.url}")
        try:
            response = session.request(
                request.method,
                request.url,
                headers=request_headers(request),
                data=request_payload(request),
                allow_redirects=options.follow_redirects,
                timeout=options.timeout,
                verify=options.verify_tls,
                stream=True,
                **options.extra,
            )
        except requests.RequestException as e:
            raise failure_from_requests(e) from e

        # Wire bytes; content codings are left to the caller
        try:
            body = response.raw.read(decode_content=False)
        except urllib3.exceptions.HTTPError as e:
            response.close()
            raise failure_from_urllib3(e) from e

        hops = [_hop_from_response(hop) for hop in response.history]
        hops.append(_hop_from_response(response))
        return render_exchange(hops, body)

    def close(self) -> None:
        """Close the underlying session and its pooled connections."""
        if self._session is not None:
            self._session.close()
            self._session = None
