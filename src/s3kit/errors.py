"""Error taxonomy and the uniform error value carried by responses.

Library code raises the exceptions defined here. The client is the only
place that converts them into an ``Error`` value attached to a response,
so callers never need ``try``/``except`` around an operation call.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class ErrorKind(enum.Enum):
    """Category of a failed call."""
    INVALID_ARGUMENT = "InvalidArgumentError"  # Local validation, no I/O performed
    CONFIGURATION = "ConfigurationError"       # Unresolvable endpoint/region
    CREDENTIAL = "CredentialError"             # Provider could not supply credentials
    SIGNING = "SigningError"                   # Malformed signing inputs
    TRANSPORT = "TransportError"               # Network-level failure
    SERVICE = "ServiceError"                   # Non-success HTTP status from the server


class S3KitError(Exception):
    """Base class for every error raised by s3kit."""
    kind: ErrorKind = ErrorKind.SERVICE


class InvalidArgumentError(S3KitError, ValueError):
    """Raised when operation arguments fail local validation."""
    kind = ErrorKind.INVALID_ARGUMENT


class ConfigurationError(S3KitError):
    """Raised when an endpoint, region or client configuration is unusable."""
    kind = ErrorKind.CONFIGURATION


class CredentialError(S3KitError):
    """Raised when a credential provider cannot supply usable credentials."""
    kind = ErrorKind.CREDENTIAL


class SigningError(S3KitError):
    """Raised when a request cannot be signed."""
    kind = ErrorKind.SIGNING


class TransportError(S3KitError):
    """Raised by transports on timeouts, refused connections, TLS failures."""
    kind = ErrorKind.TRANSPORT


@dataclass(frozen=True)
class Error:
    """Failure detail attached to an unsuccessful response.

    Attributes:
        kind: Which layer failed
        message: Human-readable description, never empty
        code: Server error code (e.g. "NoSuchBucket") for service errors
        resource: Resource the server reported the error for
        request_id: Server request id, useful when contacting support
        host_id: Server host id
        status_code: HTTP status for service errors
    """
    kind: ErrorKind
    message: str
    code: Optional[str] = None
    resource: Optional[str] = None
    request_id: Optional[str] = None
    host_id: Optional[str] = None
    status_code: Optional[int] = None

    def __post_init__(self):
        if not self.message:
            raise ValueError("Error message must be non-empty")

    @classmethod
    def from_exception(cls, exc: S3KitError) -> Error:
        """Build an error value from a raised s3kit exception."""
        return cls(kind=exc.kind, message=str(exc) or type(exc).__name__)

    def __str__(self) -> str:
        if self.kind is not ErrorKind.SERVICE:
            return f"{self.kind.value}: {self.message}"

        details = [
            f"{name}={value}"
            for name, value in (
                ("resource", self.resource),
                ("request_id", self.request_id),
                ("host_id", self.host_id),
                ("status", self.status_code),
            )
            if value is not None
        ]
        text = f"{self.code or self.kind.value}: {self.message}"
        if details:
            text += f" ({', '.join(details)})"
        return text


__all__ = [
    "ErrorKind",
    "S3KitError",
    "InvalidArgumentError",
    "ConfigurationError",
    "CredentialError",
    "SigningError",
    "TransportError",
    "Error",
]
