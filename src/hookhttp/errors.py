"""Exception hierarchy for hookhttp."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models.message import Response


class HookHttpError(Exception):
    """Base class for every error raised by hookhttp."""


class TransportFailure(HookHttpError):
    """
    The network exchange itself failed (DNS, connect, TLS, timeout, ...).

    No response exists for a transport failure. On the synchronous path it is
    offered to ``exception`` subscribers before being raised; on the async path
    it is handed to the error callback.

    Attributes:
        code: Short machine-readable failure code (e.g. ``"timeout"``)
        message: Human-readable description from the transport
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"[{code}] {message}")
        self.code = code
        self.message = message


class HttpError(HookHttpError):
    """A completed exchange ended with a status code of 400 or above."""

    def __init__(self, response: Response) -> None:
        super().__init__(f"HTTP error {response.status}")
        self.response = response

    @property
    def status(self) -> int:
        return self.response.status


class ResponseFramingError(HookHttpError):
    """Transport metadata does not match the raw response blob it returned."""


class BodyNotRewindableError(HookHttpError):
    """A retry was requested for a request whose stream body cannot be re-read."""
