"""Per-operation argument contracts.

Every operation takes a frozen Args dataclass. ``validate()`` runs before
any network activity and raises ``InvalidArgumentError`` on bad input;
the client turns that into a failed response without calling the
transport.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .errors import InvalidArgumentError
from .signer import MAX_PRESIGN_EXPIRY

# Bucket naming: 3-63 chars, lowercase letters, digits, '-' and '.',
# starting and ending with a letter or digit
_BUCKET_RE = re.compile(r"^[a-z0-9][a-z0-9.-]{1,61}[a-z0-9]$")
_IPV4_RE = re.compile(r"^\d{1,3}(?:\.\d{1,3}){3}$")
_BUCKET_BAD_SEQUENCES = ("..", ".-", "-.")

MAX_OBJECT_NAME_BYTES = 1024
MAX_PUT_OBJECT_SIZE = 5 * 1024 ** 3
MAX_LIST_KEYS = 1000

_MAX_TAG_KEY_LENGTH = 128
_MAX_TAG_VALUE_LENGTH = 256
_MAX_BUCKET_TAGS = 50
_MAX_OBJECT_TAGS = 10

# Set by the client while signing
_RESERVED_HEADERS = frozenset({
    "authorization",
    "host",
    "x-amz-date",
    "x-amz-content-sha256",
    "x-amz-security-token",
})
_PRESIGN_METHODS = frozenset({"GET", "PUT", "HEAD", "DELETE"})


def check_bucket_name(bucket: str) -> None:
    """Validate a bucket name against S3 naming rules.

    Raises:
        InvalidArgumentError: If the name is not a valid bucket name
    """
    if not bucket:
        raise InvalidArgumentError("bucket name must be non-empty")
    if not 3 <= len(bucket) <= 63:
        raise InvalidArgumentError(
            f"bucket name must be 3 to 63 characters long, got {len(bucket)}: {bucket!r}"
        )
    if not _BUCKET_RE.match(bucket):
        raise InvalidArgumentError(
            f"invalid bucket name {bucket!r}: only lowercase letters, digits, '-' and '.' "
            "are allowed, and it must start and end with a letter or digit"
        )
    if any(seq in bucket for seq in _BUCKET_BAD_SEQUENCES):
        raise InvalidArgumentError(
            f"invalid bucket name {bucket!r}: '..', '.-' and '-.' are not allowed"
        )
    if _IPV4_RE.match(bucket):
        raise InvalidArgumentError(f"bucket name must not be an IP address: {bucket!r}")


def check_object_name(object_name: str) -> None:
    if not object_name:
        raise InvalidArgumentError("object name must be non-empty")
    if len(object_name.encode("utf-8")) > MAX_OBJECT_NAME_BYTES:
        raise InvalidArgumentError(f"object name must be at most {MAX_OBJECT_NAME_BYTES} bytes")


def check_tags(tags: Mapping[str, str], for_object: bool) -> None:
    limit = _MAX_OBJECT_TAGS if for_object else _MAX_BUCKET_TAGS
    if len(tags) > limit:
        kind = "object" if for_object else "bucket"
        raise InvalidArgumentError(f"only {limit} {kind} tags are allowed, got {len(tags)}")
    for key, value in tags.items():
        if not isinstance(key, str) or not key or len(key) > _MAX_TAG_KEY_LENGTH:
            raise InvalidArgumentError(f"invalid tag key {key!r}")
        if not isinstance(value, str) or len(value) > _MAX_TAG_VALUE_LENGTH:
            raise InvalidArgumentError(f"invalid tag value {value!r} for key {key!r}")


def check_header(name: str, value: str) -> None:
    """Header names and values must be printable ASCII to be sent as-is."""
    if not isinstance(name, str) or not name or not name.isascii() or not name.isprintable():
        raise InvalidArgumentError(f"invalid header name {name!r}")
    if not isinstance(value, str) or not value.isascii() or not value.isprintable():
        raise InvalidArgumentError(f"header {name!r} has a non-ASCII or unprintable value")


@dataclass(frozen=True)
class BaseArgs:
    """Fields shared by every operation.

    Attributes:
        extra_headers: Additional request headers (signed)
        extra_query_params: Additional query parameters (signed)
        region: Region for this call; must match the endpoint region
    """
    extra_headers: Mapping[str, str] = field(default_factory=dict)
    extra_query_params: Mapping[str, str] = field(default_factory=dict)
    region: Optional[str] = None

    def validate(self) -> None:
        for name, value in self.extra_headers.items():
            check_header(name, value)
            if name.lower() in _RESERVED_HEADERS:
                raise InvalidArgumentError(f"header {name!r} is set by the client and cannot be overridden")


@dataclass(frozen=True)
class BucketArgs(BaseArgs):
    bucket: str = ""

    def validate(self) -> None:
        super().validate()
        check_bucket_name(self.bucket)


@dataclass(frozen=True)
class ObjectArgs(BucketArgs):
    object_name: str = ""
    version_id: Optional[str] = None

    def validate(self) -> None:
        super().validate()
        check_object_name(self.object_name)


@dataclass(frozen=True)
class ListBucketsArgs(BaseArgs):
    pass


@dataclass(frozen=True)
class BucketExistsArgs(BucketArgs):
    pass


@dataclass(frozen=True)
class ListObjectsArgs(BucketArgs):
    """One page of a ListObjectsV2 listing.

    Attributes:
        prefix: Only keys starting with this prefix
        delimiter: Group keys sharing a prefix up to the delimiter
        max_keys: Page size, 1..1000
        continuation_token: Token from the previous page
        start_after: List keys after this one
    """
    prefix: Optional[str] = None
    delimiter: Optional[str] = None
    max_keys: int = MAX_LIST_KEYS
    continuation_token: Optional[str] = None
    start_after: Optional[str] = None

    def validate(self) -> None:
        super().validate()
        if not 1 <= self.max_keys <= MAX_LIST_KEYS:
            raise InvalidArgumentError(f"max_keys must be between 1 and {MAX_LIST_KEYS}, got {self.max_keys}")


@dataclass(frozen=True)
class DeleteBucketTagsArgs(BucketArgs):
    pass


@dataclass(frozen=True)
class GetBucketTagsArgs(BucketArgs):
    pass


@dataclass(frozen=True)
class SetBucketTagsArgs(BucketArgs):
    tags: Mapping[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        super().validate()
        check_tags(self.tags, for_object=False)


@dataclass(frozen=True)
class StatObjectArgs(ObjectArgs):
    pass


@dataclass(frozen=True)
class GetObjectArgs(ObjectArgs):
    """Download an object or a byte range of it.

    Attributes:
        offset: First byte to read
        length: Number of bytes to read; None reads to the end
    """
    offset: int = 0
    length: Optional[int] = None

    def validate(self) -> None:
        super().validate()
        if self.offset < 0:
            raise InvalidArgumentError(f"offset must be non-negative, got {self.offset}")
        if self.length is not None and self.length <= 0:
            raise InvalidArgumentError(f"length must be positive, got {self.length}")


@dataclass(frozen=True)
class PutObjectArgs(ObjectArgs):
    data: bytes = b""
    content_type: str = "application/octet-stream"
    user_metadata: Mapping[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        super().validate()
        if not isinstance(self.data, (bytes, bytearray)):
            raise InvalidArgumentError(f"data must be bytes, got {type(self.data).__name__}")
        if len(self.data) > MAX_PUT_OBJECT_SIZE:
            raise InvalidArgumentError(f"single PUT is limited to {MAX_PUT_OBJECT_SIZE} bytes")
        if not self.content_type:
            raise InvalidArgumentError("content_type must be non-empty")
        check_header("Content-Type", self.content_type)
        for key, value in self.user_metadata.items():
            if not key or not key.isascii():
                raise InvalidArgumentError(f"invalid user metadata key {key!r}")
            check_header(f"x-amz-meta-{key}", value)


@dataclass(frozen=True)
class RemoveObjectArgs(ObjectArgs):
    pass


@dataclass(frozen=True)
class DeleteObjectTagsArgs(ObjectArgs):
    pass


@dataclass(frozen=True)
class GetObjectTagsArgs(ObjectArgs):
    pass


@dataclass(frozen=True)
class SetObjectTagsArgs(ObjectArgs):
    tags: Mapping[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        super().validate()
        check_tags(self.tags, for_object=True)


@dataclass(frozen=True)
class GetPresignedObjectUrlArgs(ObjectArgs):
    """Presigned URL for an object; no request is sent.

    Attributes:
        method: HTTP method the URL is valid for
        expires: Validity in seconds, at most 7 days
    """
    method: str = "GET"
    expires: int = MAX_PRESIGN_EXPIRY

    def validate(self) -> None:
        super().validate()
        if self.method.upper() not in _PRESIGN_METHODS:
            raise InvalidArgumentError(f"cannot presign method {self.method!r}")
        if not 1 <= self.expires <= MAX_PRESIGN_EXPIRY:
            raise InvalidArgumentError(
                f"expires must be between 1 and {MAX_PRESIGN_EXPIRY} seconds, got {self.expires}"
            )


__all__ = [
    "check_bucket_name",
    "check_object_name",
    "check_tags",
    "check_header",
    "BaseArgs",
    "BucketArgs",
    "ObjectArgs",
    "ListBucketsArgs",
    "BucketExistsArgs",
    "ListObjectsArgs",
    "DeleteBucketTagsArgs",
    "GetBucketTagsArgs",
    "SetBucketTagsArgs",
    "StatObjectArgs",
    "GetObjectArgs",
    "PutObjectArgs",
    "RemoveObjectArgs",
    "DeleteObjectTagsArgs",
    "GetObjectTagsArgs",
    "SetObjectTagsArgs",
    "GetPresignedObjectUrlArgs",
]
