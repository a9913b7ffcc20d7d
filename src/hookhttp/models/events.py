"""Hook event names and the retry decision shared by hook handlers."""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class HookEvent(str, Enum):
    """Events emitted by the client during a request's lifecycle."""

    BEFORE_REQUEST = "before_request"  # Once per send(), before the first attempt
    AFTER_REQUEST = "after_request"  # Once per send(), with the final response
    ERROR = "error"  # Any attempt that ended with status >= 400
    EXCEPTION = "exception"  # Any attempt that failed at the transport level


EventName = Union[HookEvent, str]


def error_channel(status_code: int) -> str:
    """Name of the event scoped to one status code, e.g. ``error:404``."""
    return f"{HookEvent.ERROR.value}:{int(status_code)}"


def event_key(event: EventName) -> str:
    """Normalize a HookEvent member or plain string to the registry key."""
    if isinstance(event, HookEvent):
        return event.value
    return str(event)


@dataclass
class RetryDecision:
    """
    Mutable decision handed to ``error``, ``error:<code>`` and ``exception`` handlers.

    Every handler of the events raised for one attempt receives the same object.
    Setting ``retry`` to True asks the engine to run another attempt.

    Attributes:
        retry_count: Retries already made for this send() call (0 on the first failure)
        retry: Set to True to request another attempt
    """

    retry_count: int = 0
    retry: bool = False
