"""Turn a raw transport blob into a structured Response."""

import logging
import re

from requests.structures import CaseInsensitiveDict

from ..errors import ResponseFramingError
from ..models.message import Response

logger = logging.getLogger(__name__)

# Header sections of consecutive hops are separated by an empty line
_SECTION_SPLIT = re.compile(r"\r?\n\r?\n")
_LINE_SPLIT = re.compile(r"\r?\n")

# HTTP header bytes are ISO-8859-1 on the wire
HEADER_ENCODING = "iso-8859-1"


def parse_header_section(section: str) -> CaseInsensitiveDict:
    """
    Parse one header section into a case-insensitive mapping.

    Lines without a colon (the status line, stray fragments) are dropped.
    A repeated header name keeps its last value.

    Args:
        section: Header lines of a single hop

    Returns:
        Header mapping
    """
    headers: CaseInsensitiveDict = CaseInsensitiveDict()
    for line in _LINE_SPLIT.split(section):
        name, sep, value = line.partition(":")
        if not sep:
            continue
        headers[name.strip()] = value.strip()
    return headers


def last_header_section(header_blob: str) -> str:
    """Return the header section of the final hop in a multi-hop header blob."""
    sections = _SECTION_SPLIT.split(header_blob.strip("\r\n"))
    return sections[-1]


def frame_response(raw: bytes, header_size: int, status_code: int) -> Response:
    """
    Split a raw exchange into status, final-hop headers and body.

    A single exchange may hold several stacked header sections (100 Continue
    interim responses, redirect hops). Only the last one describes the
    response that the body belongs to.

    Args:
        raw: Full bytes returned by the transport, headers first
        header_size: Byte length of all header sections at the front of ``raw``
        status_code: Status reported by the transport for the final hop

    Returns:
        Response built from the final hop

    Raises:
        ResponseFramingError: If ``header_size`` does not fit inside ``raw``
    """
    if header_size < 0 or header_size > len(raw):
        raise ResponseFramingError(
            f"Transport reported {header_size} header bytes for a {len(raw)} byte response"
        )

    header_blob = raw[:header_size].decode(HEADER_ENCODING)
    body = raw[header_size:]

    headers = parse_header_section(last_header_section(header_blob))
    logger.debug(f"Framed response: status={status_code}, {len(headers)} headers, {len(body)} body bytes")

    return Response(status=int(status_code), headers=headers, body=bytes(body))
