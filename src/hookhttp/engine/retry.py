"""Synchronous send path with hook-driven retries."""

import logging
from typing import Optional

from ..errors import BodyNotRewindableError, HttpError, TransportFailure
from ..hooks import HookRegistry
from ..http.classifier import classify
from ..http.framer import frame_response
from ..models.config import ClientConfig
from ..models.events import HookEvent, RetryDecision, error_channel
from ..models.message import Request, Response
from ..models.outcome import Outcome, OutcomeKind
from ..transport.protocols import Transport, TransportSession

logger = logging.getLogger(__name__)


def _body_offset(request: Request) -> Optional[int]:
    """Offset of a seekable stream body, or None for bytes and one-shot streams."""
    body = request.body
    if not request.is_streaming:
        return None
    seekable = getattr(body, "seekable", None)
    if seekable is None or not seekable():
        return None
    return body.tell()


class RetryEngine:
    """
    Runs one request to completion, retrying whenever a hook asks for it.

    There is no built-in backoff policy: retries are opt-in through the
    ``error``, ``error:<code>`` and ``exception`` events. A handler sets
    ``decision.retry = True`` to get another attempt and uses
    ``decision.retry_count`` to know when to stop.

    Event order for one send():
        before_request -> (exception | error, error:<code>) per attempt -> after_request
    """

    def __init__(self, transport: Transport, hooks: HookRegistry, config: ClientConfig) -> None:
        """
        Initialize the engine.

        Args:
            transport: Transport providing the reusable session
            hooks: Registry whose events drive the retry decisions
            config: Client configuration, read on every call
        """
        self._transport = transport
        self._hooks = hooks
        self._config = config
        self._session: Optional[TransportSession] = None

    @property
    def session(self) -> TransportSession:
        """Get or open the session shared by every send() call."""
        if self._session is None:
            self._session = self._transport.open_session()
        return self._session

    def attempt(self, request: Request) -> Outcome:
        """Run a single exchange and classify its result."""
        try:
            exchange = self.session.execute(request, self._config.transport)
        except TransportFailure as e:
            logger.warning(f"{request.method} {request.url} failed: {e}")
            return classify(error=e)

        response = frame_response(exchange.raw, exchange.header_size, exchange.status_code)
        logger.debug(f"{request.method} {request.url} -> {response.status}")
        return classify(response=response)

    def send(self, request: Request) -> Response:
        """
        Send a request and return the final response.

        Args:
            request: Request to send; ``before_request`` handlers may edit it

        Returns:
            Response of the last attempt

        Raises:
            TransportFailure: If the last attempt failed at the transport
                level and no ``exception`` handler asked for a retry
            HttpError: If ``throw_http_errors`` is enabled and the final
                status is 400 or above
            BodyNotRewindableError: If a retry is requested for a request
                whose stream body is not seekable
        """
        self._hooks.emit(HookEvent.BEFORE_REQUEST, request)

        retry_count = 0
        while True:
            body, offset = request.body, _body_offset(request)
            outcome = self.attempt(request)
            decision = RetryDecision(retry_count=retry_count)

            if outcome.kind is OutcomeKind.TRANSPORT_ERROR:
                self._hooks.emit(HookEvent.EXCEPTION, request, outcome.error, decision)
                if not decision.retry:
                    raise outcome.error
            elif outcome.kind is OutcomeKind.HTTP_ERROR:
                self._hooks.emit(HookEvent.ERROR, request, outcome.response, decision)
                self._hooks.emit(error_channel(outcome.status_code), request, outcome.response, decision)

            if not decision.retry:
                break
            retry_count += 1
            self._rewind(request, body, offset)
            logger.info(f"Retrying {request.method} {request.url} (retry {retry_count})")

        response = outcome.response
        self._hooks.emit(HookEvent.AFTER_REQUEST, request, response)

        if self._config.throw_http_errors and response.is_error:
            raise HttpError(response)
        return response

    @staticmethod
    def _rewind(request: Request, body, offset: Optional[int]) -> None:
        """Seek a stream body back to where the previous attempt started reading."""
        if not request.is_streaming or request.body is not body:
            return
        if offset is None:
            raise BodyNotRewindableError(
                f"Cannot retry {request.method} {request.url}: the body stream is not seekable"
            )
        body.seek(offset)

    def close(self) -> None:
        """Close the shared session."""
        if self._session is not None:
            self._session.close()
            self._session = None
