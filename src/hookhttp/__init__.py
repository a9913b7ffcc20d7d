"""
hookhttp - HTTP client engine with hook-driven retries and multiplexed async requests.

Usage:
    from hookhttp import Client, Request

    with Client() as client:

        @client.on("error:503")
        def retry_unavailable(request, response, decision):
            decision.retry = decision.retry_count < 2

        response = client.send(Request("GET", "https://example.com"))
        print(response.status, response.headers["Content-Type"])
"""

__version__ = "1.0.0"

from .client import Client
from .engine import AsyncDispatcher, RetryEngine
from .errors import BodyNotRewindableError, HookHttpError, HttpError, ResponseFramingError, TransportFailure
from .hooks import HookRegistry
from .http import classify, frame_response
from .logging_config import setup_logging
from .models import (
    ClientConfig,
    HookEvent,
    Outcome,
    OutcomeKind,
    Request,
    Response,
    RetryDecision,
    TransportOptions,
    error_channel,
)
from .transport import HttpTransport, RawExchange, Transport

__all__ = [
    "__version__",
    # Core
    "Client",
    "AsyncDispatcher",
    "RetryEngine",
    "HookRegistry",
    "classify",
    "frame_response",
    "setup_logging",
    # Config
    "ClientConfig",
    "TransportOptions",
    # Models
    "Request",
    "Response",
    "Outcome",
    "OutcomeKind",
    "HookEvent",
    "RetryDecision",
    "error_channel",
    # Errors
    "BodyNotRewindableError",
    "HookHttpError",
    "HttpError",
    "ResponseFramingError",
    "TransportFailure",
    # Transport
    "HttpTransport",
    "RawExchange",
    "Transport",
]
