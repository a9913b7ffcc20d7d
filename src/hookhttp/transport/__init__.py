"""Transport abstraction and the default requests/aiohttp backends."""

from .http import HttpTransport
from .multiplex import AiohttpMultiplex
from .protocols import Completion, MultiplexHandle, RawExchange, Transport, TransportSession
from .raw import Hop, render_exchange
from .sync import RequestsSession

__all__ = [
    "AiohttpMultiplex",
    "Completion",
    "Hop",
    "HttpTransport",
    "MultiplexHandle",
    "RawExchange",
    "RequestsSession",
    "Transport",
    "TransportSession",
    "render_exchange",
]
