"""Classify a finished attempt as success, HTTP error or transport error."""

from typing import Optional

from ..errors import TransportFailure
from ..models.message import Response
from ..models.outcome import Outcome

# Statuses at or above this value are HTTP errors
HTTP_ERROR_THRESHOLD = 400


def classify(
    response: Optional[Response] = None,
    error: Optional[TransportFailure] = None,
) -> Outcome:
    """
    Classify the result of one transport exchange.

    Exactly one of ``response`` and ``error`` must be given.

    Args:
        response: Framed response when the exchange completed
        error: Transport failure when it did not

    Returns:
        Outcome with the matching kind
    """
    if (response is None) == (error is None):
        raise ValueError("classify() needs exactly one of response or error")

    if error is not None:
        return Outcome.transport_error(error)
    if response.status >= HTTP_ERROR_THRESHOLD:
        return Outcome.http_error(response)
    return Outcome.success(response)
