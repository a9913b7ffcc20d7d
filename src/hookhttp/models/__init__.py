"""Hookhttp value objects, configuration and event models."""

from .config import ClientConfig, TransportOptions
from .events import EventName, HookEvent, RetryDecision, error_channel, event_key
from .message import Body, Request, Response
from .outcome import Outcome, OutcomeKind

__all__ = [
    # Config
    "ClientConfig",
    "TransportOptions",
    # Events
    "EventName",
    "HookEvent",
    "RetryDecision",
    "error_channel",
    "event_key",
    # Messages
    "Body",
    "Request",
    "Response",
    # Outcomes
    "Outcome",
    "OutcomeKind",
]
