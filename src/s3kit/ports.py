"""Port definitions for the client's collaborators.

These protocols are the boundaries between the signing/dispatch core and
everything it delegates: where credentials come from, how bytes travel
over the network, and how bodies are encoded. Default adapters live in
``credentials``, ``transport`` and ``codec``; tests substitute fakes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Protocol, runtime_checkable

from .credentials import Credentials
from .models import BucketInfo, ErrorDocument, ListObjectsResult


@dataclass(frozen=True)
class HttpResponse:
    """Raw outcome of a dispatched request.

    Attributes:
        status: HTTP status code
        headers: Response headers, names lower-cased
        body: Response body bytes
    """
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""


@runtime_checkable
class CredentialProvider(Protocol):
    """Source of credentials for signing."""

    def retrieve(self) -> Credentials:
        """Return credentials valid at call time.

        Raises:
            CredentialError: If no usable credentials exist
        """
        ...


@runtime_checkable
class Transport(Protocol):
    """Executes a signed request.

    Connection reuse, TLS and any retry policy belong to implementations.
    """

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
        timeout: Optional[float],
    ) -> HttpResponse:
        """Send the request and return the response.

        Args:
            method: HTTP method
            url: Full URL including the encoded query string
            headers: Request headers, signature included
            body: Request payload
            timeout: Deadline in seconds supplied by the caller

        Returns:
            HttpResponse for any HTTP status

        Raises:
            TransportError: On timeouts, refused connections, TLS failures
        """
        ...


@runtime_checkable
class BodyCodec(Protocol):
    """Encodes request bodies and decodes response payloads.

    Decoders raise ValueError on malformed input.
    """

    def decode_error(self, body: bytes) -> ErrorDocument:
        ...

    def encode_tags(self, tags: Mapping[str, str]) -> bytes:
        ...

    def decode_tags(self, body: bytes) -> Dict[str, str]:
        ...

    def decode_list_buckets(self, body: bytes) -> List[BucketInfo]:
        ...

    def decode_list_objects(self, body: bytes) -> ListObjectsResult:
        ...


__all__ = [
    "HttpResponse",
    "CredentialProvider",
    "Transport",
    "BodyCodec",
]
