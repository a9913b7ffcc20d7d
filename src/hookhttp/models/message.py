"""Request and response value objects."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import BinaryIO, Optional, Union

from requests.structures import CaseInsensitiveDict

# Either an in-memory payload or a readable binary stream
Body = Union[bytes, BinaryIO]


def _as_headers(headers: Optional[Mapping[str, str]]) -> CaseInsensitiveDict:
    if isinstance(headers, CaseInsensitiveDict):
        return headers
    return CaseInsensitiveDict(headers or {})


@dataclass
class Request:
    """
    Outgoing HTTP request.

    The body is a single field so that an in-memory payload and a stream can
    never both be set. ``before_request`` subscribers may edit the request in
    place (for example to add an Authorization header); the engine itself
    never changes it.

    Attributes:
        method: HTTP method, normalized to upper case
        url: Absolute URL
        headers: Case-insensitive header mapping
        body: ``bytes``, a readable binary stream, or None

    A seekable stream body is rewound to its starting offset before each
    retry; retrying a request with a one-shot stream raises
    BodyNotRewindableError.
    """

    method: str
    url: str
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: Optional[Body] = None

    def __post_init__(self) -> None:
        self.method = self.method.upper()
        self.headers = _as_headers(self.headers)
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")
        elif isinstance(self.body, (bytearray, memoryview)):
            self.body = bytes(self.body)
        elif self.body is not None and not isinstance(self.body, bytes) and not hasattr(self.body, "read"):
            raise TypeError(f"Request body must be bytes or a readable stream, got {type(self.body).__name__}")

    @property
    def is_streaming(self) -> bool:
        """True when the body is a stream handle rather than bytes."""
        return self.body is not None and not isinstance(self.body, bytes)


@dataclass
class Response:
    """
    Structured HTTP response produced by the response framer.

    Attributes:
        status: Status code of the final hop
        headers: Case-insensitive header mapping of the final hop
        body: Body bytes as received; a Content-Encoding such as gzip is
            not undone, so the headers always describe these bytes
    """

    status: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""

    def __post_init__(self) -> None:
        self.headers = _as_headers(self.headers)

    @property
    def is_error(self) -> bool:
        return self.status >= 400

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")
