"""Named event bus used by the client to call user hooks."""

import logging
from collections import defaultdict
from typing import Any, Callable, Optional

from .models.events import EventName, event_key

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class HookRegistry:
    """
    Per-client registry of named event subscribers.

    Handlers run synchronously, on the caller's thread, in the order they
    were subscribed. Status-scoped channels such as ``error:503`` are plain
    event names.

    Example:
        hooks = HookRegistry()

        @hooks.on("error:401")
        def refresh_token(request, response, decision):
            request.headers["Authorization"] = f"Bearer {new_token()}"
            decision.retry = decision.retry_count < 1

        hooks.emit("error:401", request, response, RetryDecision())
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def on(self, event: EventName, handler: Optional[Handler] = None) -> Any:
        """
        Subscribe a handler to an event.

        Can be used directly or as a decorator when ``handler`` is omitted.

        Args:
            event: HookEvent member or event name
            handler: Callable invoked with the event's arguments

        Returns:
            The handler, or a decorator when no handler was given
        """
        if handler is None:

            def decorator(func: Handler) -> Handler:
                self.on(event, func)
                return func

            return decorator

        key = event_key(event)
        self._handlers[key].append(handler)
        logger.info(f"Registered {key} hook: {getattr(handler, '__name__', repr(handler))}")
        return handler

    def off(self, event: EventName, handler: Handler) -> bool:
        """
        Unsubscribe a handler.

        Returns:
            True if the handler was subscribed to the event
        """
        key = event_key(event)
        handlers = self._handlers.get(key)
        if not handlers or handler not in handlers:
            return False
        handlers.remove(handler)
        if not handlers:
            del self._handlers[key]
        return True

    def emit(self, event: EventName, *args: Any) -> None:
        """
        Invoke every handler of an event in subscription order.

        Exceptions raised by handlers propagate to the caller.
        """
        key = event_key(event)
        # Copy so handlers may subscribe or unsubscribe while being called
        handlers = list(self._handlers.get(key, ()))
        if handlers:
            logger.debug(f"Emitting {key} to {len(handlers)} handler(s)")
        for handler in handlers:
            handler(*args)

    def listeners(self, event: EventName) -> list[Handler]:
        """Return the handlers subscribed to an event, in call order."""
        return list(self._handlers.get(event_key(event), ()))

    def clear(self, event: Optional[EventName] = None) -> None:
        """Remove the handlers of one event, or of every event."""
        if event is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_key(event), None)
