"""Classification results for a completed attempt."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import TransportFailure
from .message import Response


class OutcomeKind(str, Enum):
    """The three ways an attempt can end."""

    SUCCESS = "success"
    HTTP_ERROR = "http_error"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class Outcome:
    """
    Tagged result of one attempt.

    ``SUCCESS`` and ``HTTP_ERROR`` carry a response, ``TRANSPORT_ERROR`` carries
    the transport failure. Exactly one payload is ever set.

    Example:
        outcome = classify(response=response)
        if outcome.kind is OutcomeKind.HTTP_ERROR:
            print(f"Server said {outcome.status_code}")
    """

    kind: OutcomeKind
    response: Optional[Response] = None
    error: Optional[TransportFailure] = None

    def __post_init__(self) -> None:
        if self.kind is OutcomeKind.TRANSPORT_ERROR:
            if self.error is None or self.response is not None:
                raise ValueError("Transport error outcome requires an error and no response")
        elif self.response is None or self.error is not None:
            raise ValueError(f"{self.kind.value} outcome requires a response and no error")

    @classmethod
    def success(cls, response: Response) -> Outcome:
        return cls(OutcomeKind.SUCCESS, response=response)

    @classmethod
    def http_error(cls, response: Response) -> Outcome:
        return cls(OutcomeKind.HTTP_ERROR, response=response)

    @classmethod
    def transport_error(cls, error: TransportFailure) -> Outcome:
        return cls(OutcomeKind.TRANSPORT_ERROR, error=error)

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @property
    def status_code(self) -> Optional[int]:
        """Status of the response, None for transport errors."""
        return self.response.status if self.response is not None else None

    @property
    def error_code(self) -> Optional[str]:
        return self.error.code if self.error is not None else None

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error is not None else None
