"""AWS Signature Version 4 request signing.

Everything here is a pure function of its inputs: the same method, path,
query, headers, payload hash, credentials, timestamp and region always
produce the same signature. Canonicalization rules:

- Header names are lower-cased, values trimmed with runs of whitespace
  collapsed, and headers sorted by lower-cased name
- Query parameters are RFC 3986 encoded and sorted by key, then value
- Paths are encoded per segment with ``/`` kept
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import re
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional, Tuple
from urllib.parse import quote

from .credentials import Credentials
from .errors import SigningError

ALGORITHM = "AWS4-HMAC-SHA256"
SERVICE = "s3"
TERMINATOR = "aws4_request"
UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"
EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
MAX_PRESIGN_EXPIRY = 7 * 24 * 3600

# Never part of the signature
_UNSIGNED_HEADERS = frozenset({"authorization", "user-agent"})
_WHITESPACE_RE = re.compile(r"\s+")


def sha256_hash(data: Optional[bytes]) -> str:
    """Hex SHA-256 of ``data``; empty or None payloads hash as empty."""
    if not data:
        return EMPTY_SHA256
    return hashlib.sha256(data).hexdigest()


def md5sum_base64(data: bytes) -> str:
    """Base64 MD5 digest, as used by the Content-MD5 header."""
    return base64.b64encode(hashlib.md5(data).digest()).decode()


def uri_encode(value: str, encode_slash: bool = True) -> str:
    """Percent-encode everything except RFC 3986 unreserved characters."""
    return quote(value, safe="~" if encode_slash else "/~")


def canonical_query(query: Optional[Mapping[str, str]]) -> str:
    """Encode and sort query parameters by key, then value."""
    if not query:
        return ""
    pairs = sorted(
        (uri_encode(str(key)), uri_encode("" if value is None else str(value)))
        for key, value in query.items()
    )
    return "&".join(f"{key}={value}" for key, value in pairs)


def canonical_headers(headers: Mapping[str, str]) -> Tuple[str, str]:
    """Return (canonical header block, signed header list)."""
    normalized: Dict[str, str] = {}
    for name, value in headers.items():
        key = name.strip().lower()
        if key in _UNSIGNED_HEADERS:
            continue
        normalized[key] = _WHITESPACE_RE.sub(" ", str(value).strip())

    names = sorted(normalized)
    block = "".join(f"{name}:{normalized[name]}\n" for name in names)
    return block, ";".join(names)


def _amz_date(date: datetime) -> Tuple[str, str]:
    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    date = date.astimezone(timezone.utc)
    return date.strftime("%Y%m%dT%H%M%SZ"), date.strftime("%Y%m%d")


def _hmac(key: bytes, message: str) -> bytes:
    return hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()


def _signing_key(secret_key: str, scope_date: str, region: str) -> bytes:
    key = _hmac(("AWS4" + secret_key).encode("utf-8"), scope_date)
    key = _hmac(key, region)
    key = _hmac(key, SERVICE)
    return _hmac(key, TERMINATOR)


def _check_inputs(method: str, credentials: Optional[Credentials], date: Optional[datetime], region: str) -> None:
    if not method:
        raise SigningError("HTTP method is required")
    if credentials is None:
        raise SigningError("credentials are required")
    if not credentials.access_key:
        raise SigningError("access key is empty")
    if not credentials.secret_key:
        raise SigningError("secret key is empty")
    if date is None:
        raise SigningError("signing timestamp is required")
    if not region:
        raise SigningError("region is required")


def credential_scope(scope_date: str, region: str) -> str:
    return f"{scope_date}/{region}/{SERVICE}/{TERMINATOR}"


def canonical_request(
    method: str,
    path: str,
    query: Optional[Mapping[str, str]],
    headers: Mapping[str, str],
    content_sha256: str,
) -> Tuple[str, str]:
    """Build the canonical request; returns (canonical request, signed headers)."""
    header_block, signed_headers = canonical_headers(headers)
    request = "\n".join([
        method.upper(),
        uri_encode(path or "/", encode_slash=False),
        canonical_query(query),
        header_block,
        signed_headers,
        content_sha256,
    ])
    return request, signed_headers


def _signature(secret_key: str, amz_date: str, scope_date: str, region: str, request: str) -> str:
    string_to_sign = "\n".join([
        ALGORITHM,
        amz_date,
        credential_scope(scope_date, region),
        hashlib.sha256(request.encode("utf-8")).hexdigest(),
    ])
    key = _signing_key(secret_key, scope_date, region)
    return hmac.new(key, string_to_sign.encode("utf-8"), hashlib.sha256).hexdigest()


def sign_v4(
    method: str,
    path: str,
    query: Optional[Mapping[str, str]],
    headers: Mapping[str, str],
    content_sha256: str,
    credentials: Credentials,
    date: datetime,
    region: str,
) -> Dict[str, str]:
    """Sign a request with SigV4 header authentication.

    Args:
        method: HTTP method
        path: Unencoded request path, e.g. "/bucket/object name"
        query: Query parameters
        headers: Headers to sign; must include Host
        content_sha256: Hex SHA-256 of the payload
        credentials: Signing identity
        date: Request timestamp (naive values are taken as UTC)
        region: Region of the credential scope

    Returns:
        Headers to add to the request: x-amz-date, x-amz-content-sha256,
        x-amz-security-token (temporary credentials only) and Authorization

    Raises:
        SigningError: If any required input is missing
    """
    _check_inputs(method, credentials, date, region)
    if not content_sha256:
        raise SigningError("payload hash is required")
    if not any(name.lower() == "host" for name in headers):
        raise SigningError("host header is required")

    amz_date, scope_date = _amz_date(date)
    added = {
        "x-amz-date": amz_date,
        "x-amz-content-sha256": content_sha256,
    }
    if credentials.session_token:
        added["x-amz-security-token"] = credentials.session_token

    to_sign = {name: value for name, value in headers.items() if name.lower() not in added}
    to_sign.update(added)

    request, signed_headers = canonical_request(method, path, query, to_sign, content_sha256)
    signature = _signature(credentials.secret_key, amz_date, scope_date, region, request)

    added["Authorization"] = (
        f"{ALGORITHM} Credential={credentials.access_key}/{credential_scope(scope_date, region)}, "
        f"SignedHeaders={signed_headers}, Signature={signature}"
    )
    return added


def presign_v4(
    method: str,
    path: str,
    query: Optional[Mapping[str, str]],
    host: str,
    credentials: Credentials,
    date: datetime,
    region: str,
    expires: int,
) -> Dict[str, str]:
    """Sign a request with SigV4 query authentication (presigned URL).

    Returns:
        The full query parameter set of the presigned URL, including
        X-Amz-Signature
    """
    _check_inputs(method, credentials, date, region)
    if not host:
        raise SigningError("host is required")
    if not 1 <= expires <= MAX_PRESIGN_EXPIRY:
        raise SigningError(f"expiry must be between 1 and {MAX_PRESIGN_EXPIRY} seconds")

    amz_date, scope_date = _amz_date(date)
    params: Dict[str, str] = dict(query or {})
    params.update({
        "X-Amz-Algorithm": ALGORITHM,
        "X-Amz-Credential": f"{credentials.access_key}/{credential_scope(scope_date, region)}",
        "X-Amz-Date": amz_date,
        "X-Amz-Expires": str(expires),
        "X-Amz-SignedHeaders": "host",
    })
    if credentials.session_token:
        params["X-Amz-Security-Token"] = credentials.session_token

    request, _ = canonical_request(method, path, params, {"host": host}, UNSIGNED_PAYLOAD)
    params["X-Amz-Signature"] = _signature(credentials.secret_key, amz_date, scope_date, region, request)
    return params


__all__ = [
    "ALGORITHM",
    "EMPTY_SHA256",
    "UNSIGNED_PAYLOAD",
    "MAX_PRESIGN_EXPIRY",
    "sha256_hash",
    "md5sum_base64",
    "uri_encode",
    "canonical_query",
    "canonical_headers",
    "canonical_request",
    "credential_scope",
    "sign_v4",
    "presign_v4",
]
