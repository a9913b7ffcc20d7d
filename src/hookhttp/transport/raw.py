"""Helpers shared by the concrete transport backends."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Optional, Union

from ..http.framer import HEADER_ENCODING
from ..models.message import Body, Request
from .protocols import RawExchange

# Methods that never carry a request body
BODYLESS_METHODS = frozenset({"GET", "HEAD"})

HeaderItems = Iterable[tuple[Union[str, bytes], Union[str, bytes]]]


@dataclass(frozen=True)
class Hop:
    """Status line and headers of one response in a redirect chain."""

    status: int
    reason: str
    headers: HeaderItems
    version: str = "HTTP/1.1"


def request_payload(request: Request) -> Optional[Body]:
    """Body to send for a request: nothing for GET/HEAD, else bytes or the stream."""
    if request.method in BODYLESS_METHODS:
        return None
    return request.body


def request_headers(request: Request) -> dict[str, str]:
    """Flatten request headers into a plain dict for the HTTP library."""
    return {str(name): str(value) for name, value in request.headers.items()}


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, bytes):
        return value
    return str(value).encode(HEADER_ENCODING, errors="replace")


def render_exchange(hops: Sequence[Hop], body: bytes) -> RawExchange:
    """
    Serialize a chain of hops plus the final body into one raw blob.

    Every hop becomes a status line and header lines terminated by an empty
    line, which is the layout the response framer expects.

    Args:
        hops: Redirect history followed by the final response
        body: Body of the final response

    Returns:
        RawExchange whose status is that of the last hop
    """
    if not hops:
        raise ValueError("render_exchange() needs at least one hop")

    sections = []
    for hop in hops:
        lines = [_to_bytes(f"{hop.version} {hop.status} {hop.reason}".rstrip())]
        lines.extend(_to_bytes(name) + b": " + _to_bytes(value) for name, value in hop.headers)
        sections.append(b"\r\n".join(lines) + b"\r\n\r\n")

    header_blob = b"".join(sections)
    return RawExchange(raw=header_blob + body, header_size=len(header_blob), status_code=hops[-1].status)

