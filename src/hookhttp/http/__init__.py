"""Response framing and classification."""

from .classifier import HTTP_ERROR_THRESHOLD, classify
from .framer import frame_response, last_header_section, parse_header_section

__all__ = [
    "HTTP_ERROR_THRESHOLD",
    "classify",
    "frame_response",
    "last_header_section",
    "parse_header_section",
]
