"""Endpoint resolution: where requests go and how buckets are addressed.

Format accepted by ``Endpoint.from_url``: a bare host ("play.min.io",
"localhost:9000") or an http(s) URL without path ("https://host:port").

Well-known cloud hostnames imply virtual-hosted addressing and a region
derivable from the hostname. Everything else (MinIO, IP addresses,
localhost) uses path-style addressing and needs an explicit region.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple
from urllib.parse import urlsplit

from .errors import ConfigurationError
from .signer import canonical_query, uri_encode

DEFAULT_REGION = "us-east-1"
_DEFAULT_PORTS = {"http": 80, "https": 443}

_AWS_GLOBAL_RE = re.compile(r"^s3(?:-external-1)?\.amazonaws\.com$")
_AWS_ACCELERATE_RE = re.compile(r"^s3-accelerate(?:\.dualstack)?\.amazonaws\.com$")
_AWS_REGIONAL_RE = re.compile(
    r"^s3[.-](?:dualstack\.)?(?P<region>[a-z]{2}(?:-gov)?-[a-z]+-\d+)\.amazonaws\.com(?:\.cn)?$"
)
_ALIYUN_RE = re.compile(r"^(?P<region>oss-[a-z0-9-]+?)(?:-internal)?\.aliyuncs\.com$")
_HOST_RE = re.compile(r"^[A-Za-z0-9._-]+$|^\[[0-9A-Fa-f:.]+\]$")


class AddressingStyle(enum.Enum):
    """Where the bucket name goes in a request."""
    VIRTUAL_HOST = "virtual-host"  # bucket.host/object
    PATH = "path"                  # host/bucket/object


@dataclass(frozen=True)
class RequestTarget:
    """Resolved Host header value and unencoded request path."""
    host: str
    path: str


def _resolve_known_host(host: str) -> Tuple[Optional[str], Optional[AddressingStyle]]:
    """Return (derived region, addressing style) for well-known hosts."""
    if _AWS_GLOBAL_RE.match(host) or _AWS_ACCELERATE_RE.match(host):
        return DEFAULT_REGION, AddressingStyle.VIRTUAL_HOST
    match = _AWS_REGIONAL_RE.match(host)
    if match:
        return match.group("region"), AddressingStyle.VIRTUAL_HOST
    match = _ALIYUN_RE.match(host)
    if match:
        return match.group("region"), AddressingStyle.VIRTUAL_HOST
    return None, None


@dataclass(frozen=True)
class Endpoint:
    """Network and addressing target of a client.

    Attributes:
        host: Hostname or IP address, without port
        region: Region used in credential scopes
        port: Explicit port; None means the scheme default
        scheme: "http" or "https"
        addressing_style: Virtual-hosted or path-style bucket addressing
    """
    host: str
    region: str
    port: Optional[int] = None
    scheme: str = "https"
    addressing_style: AddressingStyle = AddressingStyle.PATH

    def __post_init__(self):
        if not self.host:
            raise ConfigurationError("endpoint host must be non-empty")
        if not _HOST_RE.match(self.host):
            raise ConfigurationError(f"invalid endpoint host: {self.host!r}")
        if self.scheme not in _DEFAULT_PORTS:
            raise ConfigurationError(f"scheme must be http or https, got {self.scheme!r}")
        if self.port is not None and not 1 <= self.port <= 65535:
            raise ConfigurationError(f"port must be between 1 and 65535, got {self.port}")
        if not self.region:
            raise ConfigurationError(f"region is required for endpoint {self.host}")

    @classmethod
    def from_url(cls, url: str, region: Optional[str] = None, secure: bool = True) -> Endpoint:
        """Resolve an endpoint from a host or URL.

        Args:
            url: "host", "host:port" or "http(s)://host[:port]"
            region: Explicit region; overrides any region derived from the host
            secure: Scheme for bare hosts (https when True)

        Raises:
            ConfigurationError: If the URL is malformed or no region can be
                determined
        """
        if not url or not url.strip():
            raise ConfigurationError("endpoint URL must be non-empty")
        url = url.strip()
        if "://" not in url:
            url = f"{'https' if secure else 'http'}://{url}"

        parts = urlsplit(url)
        scheme = parts.scheme.lower()
        if scheme not in _DEFAULT_PORTS:
            raise ConfigurationError(f"scheme must be http or https, got {parts.scheme!r}")
        if parts.path not in ("", "/") or parts.query or parts.fragment:
            raise ConfigurationError(f"endpoint URL must not contain a path or query: {url}")
        if parts.username or parts.password:
            raise ConfigurationError("endpoint URL must not embed credentials")
        host = parts.hostname
        if not host:
            raise ConfigurationError(f"endpoint URL has no host: {url}")
        try:
            port = parts.port
        except ValueError as e:
            raise ConfigurationError(f"invalid port in endpoint URL: {url}") from e
        if port == _DEFAULT_PORTS[scheme]:
            port = None
        if ":" in host:
            host = f"[{host}]"

        derived_region, style = _resolve_known_host(host)
        resolved_region = region or derived_region
        if not resolved_region:
            raise ConfigurationError(
                f"cannot determine region for endpoint {host}; pass region explicitly"
            )
        return cls(
            host=host,
            region=resolved_region,
            port=port,
            scheme=scheme,
            addressing_style=style or AddressingStyle.PATH,
        )

    @property
    def netloc(self) -> str:
        """Host header value for the endpoint itself (default ports omitted)."""
        if self.port is None or self.port == _DEFAULT_PORTS[self.scheme]:
            return self.host
        return f"{self.host}:{self.port}"

    def target(self, bucket: Optional[str] = None, object_name: Optional[str] = None) -> RequestTarget:
        """Resolve Host header and path for a bucket/object."""
        if not bucket:
            return RequestTarget(host=self.netloc, path="/")

        # Dotted bucket names break wildcard TLS certificates
        virtual = (
            self.addressing_style is AddressingStyle.VIRTUAL_HOST
            and not (self.scheme == "https" and "." in bucket)
        )
        if virtual:
            return RequestTarget(host=f"{bucket}.{self.netloc}", path=f"/{object_name or ''}")

        path = f"/{bucket}"
        if object_name:
            path += f"/{object_name}"
        return RequestTarget(host=self.netloc, path=path)

    def url(self, target: RequestTarget, query: Optional[Mapping[str, str]] = None) -> str:
        """Render a full URL; the query is encoded exactly as it is signed."""
        text = f"{self.scheme}://{target.host}{uri_encode(target.path, encode_slash=False)}"
        encoded = canonical_query(query)
        if encoded:
            text += f"?{encoded}"
        return text


__all__ = ["Endpoint", "AddressingStyle", "RequestTarget", "DEFAULT_REGION"]
