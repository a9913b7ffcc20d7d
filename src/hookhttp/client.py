"""High-level client combining the hook registry and both send paths."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Optional

from .engine.dispatcher import AsyncDispatcher, ErrorCallback, SuccessCallback
from .engine.retry import RetryEngine
from .hooks import Handler, HookRegistry
from .models.config import ClientConfig
from .models.events import EventName
from .models.message import Request, Response
from .transport.http import HttpTransport
from .transport.protocols import Transport

logger = logging.getLogger(__name__)


class Client:
    """
    HTTP client with hook-driven retries and callback-based async requests.

    Events:
        before_request(request)
        after_request(request, response)
        error(request, response, decision)
        error:<code>(request, response, decision)
        exception(request, failure, decision)

    Example:
        with Client() as client:

            @client.on("error:503")
            def retry_unavailable(request, response, decision):
                decision.retry = decision.retry_count < 2

            response = client.send(Request("GET", "https://example.com"))

            client.send_async(Request("GET", "https://example.org"), on_success=print)
            client.wait()
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Client configuration (defaults to ClientConfig())
            transport: Network backend (defaults to HttpTransport())
        """
        self.config = config or ClientConfig()
        self.hooks = HookRegistry()
        self._transport = transport or HttpTransport()
        self._engine = RetryEngine(self._transport, self.hooks, self.config)
        self._dispatcher = AsyncDispatcher(self._transport, self.config)

    def __enter__(self) -> Client:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def on(self, event: EventName, handler: Optional[Handler] = None) -> Any:
        """Subscribe to a client event. Usable as a decorator."""
        return self.hooks.on(event, handler)

    def off(self, event: EventName, handler: Handler) -> bool:
        """Unsubscribe from a client event."""
        return self.hooks.off(event, handler)

    def send(self, request: Request) -> Response:
        """
        Send a request synchronously.

        Raises:
            TransportFailure: When the exchange failed and no hook retried it
            HttpError: When HTTP errors are escalated and the final status is >= 400
        """
        return self._engine.send(request)

    def send_async(
        self,
        request: Request,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        """
        Send a request without waiting for it.

        Call poll() from time to time, or wait(), to receive the callbacks.
        HTTP-error escalation does not apply here: every failure goes to
        ``on_error``.
        """
        self._dispatcher.dispatch(request, on_success, on_error)

    def poll(self) -> bool:
        """Deliver callbacks for finished async requests. True if some are still pending."""
        return self._dispatcher.poll()

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until every async request has called back."""
        self._dispatcher.wait(timeout)

    def set_throw_exceptions(self, throw_exceptions: bool) -> None:
        """Raise HttpError from send() for final statuses of 400 and above."""
        self.config.throw_http_errors = throw_exceptions

    def add_transport_option(self, name: str, value: Any) -> None:
        """
        Add a backend option included in every transport call.

        Known options (``follow_redirects``, ``max_redirects``, ``timeout``,
        ``verify_tls``) are set directly; anything else is passed through to
        the HTTP library as a keyword argument.
        """
        options = self.config.transport
        if name in type(options).model_fields and name != "extra":
            setattr(options, name, value)
        else:
            options.extra[name] = value
        logger.debug(f"Transport option {name}={value!r}")

    def close(self) -> None:
        """Release the sync session and the multiplexing handle."""
        self._engine.close()
        self._dispatcher.close()
