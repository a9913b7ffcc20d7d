"""Protocol definitions for the transport abstraction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..errors import TransportFailure
from ..models.config import TransportOptions
from ..models.message import Request


@dataclass(frozen=True)
class RawExchange:
    """
    Undifferentiated result of a completed network exchange.

    Attributes:
        raw: Header sections of every hop followed by the final body
        header_size: Byte length of the header sections at the front of ``raw``
        status_code: Status of the final hop
    """

    raw: bytes
    header_size: int
    status_code: int


@dataclass(frozen=True)
class Completion:
    """A multiplexed exchange that finished, successfully or not."""

    transport_id: int
    exchange: Optional[RawExchange] = None
    failure: Optional[TransportFailure] = None


class TransportSession(Protocol):
    """
    Reusable handle for synchronous exchanges.

    Kept open across calls so that connections can be reused.
    """

    def execute(self, request: Request, options: TransportOptions) -> RawExchange:
        """
        Perform one exchange, blocking until it is complete.

        Raises:
            TransportFailure: When no response could be obtained
        """
        ...

    def close(self) -> None: ...


class MultiplexHandle(Protocol):
    """Drives many exchanges concurrently from a single control loop."""

    def add(self, request: Request, options: TransportOptions) -> int:
        """Start an exchange and return its transport id."""
        ...

    def step(self) -> tuple[list[Completion], bool]:
        """
        Advance every running exchange without waiting on the network.

        Returns:
            Exchanges finished since the last step, and whether any are still running
        """
        ...

    def select(self, timeout: Optional[float] = None) -> None:
        """Block until at least one exchange can make progress or finish."""
        ...

    def close(self) -> None: ...


class Transport(Protocol):
    """
    Network execution capability used by the client.

    This abstraction allows for:
    - Scripted fakes in tests
    - Different backends for the sync and async paths
    """

    def open_session(self) -> TransportSession: ...

    def open_multiplex(self) -> MultiplexHandle: ...
