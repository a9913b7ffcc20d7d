"""Pydantic configuration models for hookhttp."""

from typing import Any

from pydantic import BaseModel, Field


class TransportOptions(BaseModel):
    """Option set merged into every transport call."""

    follow_redirects: bool = Field(True, description="Follow 3xx redirects")
    max_redirects: int = Field(5, ge=0, description="Maximum redirect hops before failing")
    timeout: float = Field(30.0, gt=0, description="Seconds allowed for connecting and for each read of the response")
    verify_tls: bool = Field(True, description="Verify TLS certificates")
    extra: dict[str, Any] = Field(
        default_factory=dict,
        description="Backend-specific keyword arguments passed through to the transport",
    )

    model_config = {"extra": "forbid", "validate_assignment": True}


class ClientConfig(BaseModel):
    """
    Top-level client configuration.

    Example:
        config = ClientConfig(
            throw_http_errors=True,
            transport=TransportOptions(max_redirects=10),
        )
        client = Client(config)
    """

    throw_http_errors: bool = Field(
        False,
        description="Raise HttpError from send() when the final status is 400 or above",
    )
    transport: TransportOptions = Field(default_factory=TransportOptions)

    model_config = {"extra": "forbid", "validate_assignment": True}
