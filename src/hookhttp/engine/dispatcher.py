"""Asynchronous, callback-based dispatch over a multiplexing handle."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..http.classifier import classify
from ..http.framer import frame_response
from ..models.config import ClientConfig
from ..models.message import Request, Response
from ..models.outcome import Outcome
from ..transport.protocols import Completion, MultiplexHandle, Transport

logger = logging.getLogger(__name__)

SuccessCallback = Callable[[Response], Any]
ErrorCallback = Callable[[Outcome, Request], Any]


@dataclass
class InFlightEntry:
    """A dispatched request waiting for its exchange to finish."""

    request: Request
    on_success: Optional[SuccessCallback] = None
    on_error: Optional[ErrorCallback] = None


class AsyncDispatcher:
    """
    Runs many requests concurrently and reports each through a callback.

    Nothing here is thread-safe: ``dispatch``, ``poll`` and ``wait`` must be
    called from one thread. Failures never raise from this path; transport
    failures and HTTP errors are handed to the error callback as an Outcome
    together with the original request.

    Example:
        dispatcher = AsyncDispatcher(transport, ClientConfig())
        for url in urls:
            dispatcher.dispatch(Request("GET", url), on_success=store, on_error=report)
        dispatcher.wait()
    """

    def __init__(self, transport: Transport, config: ClientConfig) -> None:
        self._transport = transport
        self._config = config
        self._handle: Optional[MultiplexHandle] = None
        self._pending: dict[int, InFlightEntry] = {}

    @property
    def handle(self) -> MultiplexHandle:
        """Get or open the multiplexing handle, created once per dispatcher."""
        if self._handle is None:
            self._handle = self._transport.open_multiplex()
        return self._handle

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def dispatch(
        self,
        request: Request,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        """
        Start a request and return without waiting for it.

        One poll cycle runs immediately, so a request that finishes right
        away may call back before this method returns.

        Args:
            request: Request to send
            on_success: Called with the Response when status < 400
            on_error: Called with (Outcome, Request) on HTTP or transport errors
        """
        transport_id = self.handle.add(request, self._config.transport)
        self._pending[transport_id] = InFlightEntry(request, on_success, on_error)
        logger.debug(f"Dispatched {request.method} {request.url} ({len(self._pending)} pending)")
        self.poll()

    def poll(self) -> bool:
        """
        Advance running exchanges and call back for every finished one.

        Never waits on the network.

        Returns:
            True if requests are still pending afterwards
        """
        if not self._pending:
            return False

        completions, still_running = self.handle.step()
        for completion in completions:
            entry = self._pending.pop(completion.transport_id)
            self._complete(entry, completion)

        if still_running != bool(self._pending):
            logger.debug(f"Transport running={still_running} with {len(self._pending)} pending entries")
        return bool(self._pending)

    def _complete(self, entry: InFlightEntry, completion: Completion) -> None:
        if completion.failure is not None:
            outcome = classify(error=completion.failure)
        else:
            exchange = completion.exchange
            response = frame_response(exchange.raw, exchange.header_size, exchange.status_code)
            outcome = classify(response=response)

        if outcome.is_success:
            if entry.on_success is not None:
                entry.on_success(outcome.response)
        else:
            logger.debug(f"{entry.request.method} {entry.request.url} ended with {outcome.kind.value}")
            if entry.on_error is not None:
                entry.on_error(outcome, entry.request)

    def wait(self, timeout: Optional[float] = None) -> None:
        """
        Block until every dispatched request has called back.

        Args:
            timeout: Upper bound for each readiness wait, None to wait indefinitely
        """
        while self._pending:
            self.handle.select(timeout)
            self.poll()

    def close(self) -> None:
        """Close the multiplexing handle, abandoning anything still pending."""
        if self._handle is not None:
            if self._pending:
                logger.warning(f"Closing dispatcher with {len(self._pending)} pending request(s)")
            self._handle.close()
            self._handle = None
        self._pending.clear()
