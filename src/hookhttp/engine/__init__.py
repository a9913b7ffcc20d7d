"""Request lifecycle engines: synchronous retries and async dispatch."""

from .dispatcher import AsyncDispatcher, InFlightEntry
from .retry import RetryEngine

__all__ = [
    "AsyncDispatcher",
    "InFlightEntry",
    "RetryEngine",
]
