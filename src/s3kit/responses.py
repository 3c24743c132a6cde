"""Per-operation response contracts.

Every response carries an optional ``Error``; ``is_success()`` is true iff
no error is attached. Payload fields are only meaningful on success.
Responses refuse implicit truthiness so failure checks stay explicit::

    resp = client.delete_bucket_tags(DeleteBucketTagsArgs(bucket="my-bucket"))
    if resp.is_success():
        ...
    else:
        print(resp.error)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Mapping, Optional

from .errors import Error
from .models import BucketInfo, ObjectInfo


@dataclass(frozen=True)
class Response:
    """Fields shared by every operation response.

    Attributes:
        error: Failure detail; None on success
        status_code: HTTP status when a request was dispatched
        headers: Response headers (lower-cased names)
        bucket: Bucket the call addressed
        object_name: Object the call addressed
        region: Region the request was signed for
    """
    error: Optional[Error] = None
    status_code: Optional[int] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    bucket: Optional[str] = None
    object_name: Optional[str] = None
    region: Optional[str] = None

    def is_success(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        raise TypeError(
            f"truth value of {type(self).__name__} is ambiguous; use is_success()"
        )


@dataclass(frozen=True)
class BucketExistsResponse(Response):
    exists: bool = False


@dataclass(frozen=True)
class ListBucketsResponse(Response):
    buckets: List[BucketInfo] = field(default_factory=list)


@dataclass(frozen=True)
class ListObjectsResponse(Response):
    objects: List[ObjectInfo] = field(default_factory=list)
    prefixes: List[str] = field(default_factory=list)
    is_truncated: bool = False
    next_continuation_token: Optional[str] = None


@dataclass(frozen=True)
class DeleteBucketTagsResponse(Response):
    pass


@dataclass(frozen=True)
class GetBucketTagsResponse(Response):
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SetBucketTagsResponse(Response):
    pass


@dataclass(frozen=True)
class StatObjectResponse(Response):
    """Object metadata from a HEAD request."""
    etag: Optional[str] = None
    size: Optional[int] = None
    last_modified: Optional[datetime] = None
    content_type: Optional[str] = None
    version_id: Optional[str] = None
    user_metadata: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class GetObjectResponse(Response):
    data: bytes = b""
    etag: Optional[str] = None
    content_type: Optional[str] = None


@dataclass(frozen=True)
class PutObjectResponse(Response):
    etag: Optional[str] = None
    version_id: Optional[str] = None


@dataclass(frozen=True)
class RemoveObjectResponse(Response):
    version_id: Optional[str] = None


@dataclass(frozen=True)
class DeleteObjectTagsResponse(Response):
    pass


@dataclass(frozen=True)
class GetObjectTagsResponse(Response):
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SetObjectTagsResponse(Response):
    pass


@dataclass(frozen=True)
class GetPresignedObjectUrlResponse(Response):
    url: Optional[str] = None


__all__ = [
    "Response",
    "BucketExistsResponse",
    "ListBucketsResponse",
    "ListObjectsResponse",
    "DeleteBucketTagsResponse",
    "GetBucketTagsResponse",
    "SetBucketTagsResponse",
    "StatObjectResponse",
    "GetObjectResponse",
    "PutObjectResponse",
    "RemoveObjectResponse",
    "DeleteObjectTagsResponse",
    "GetObjectTagsResponse",
    "SetObjectTagsResponse",
    "GetPresignedObjectUrlResponse",
]
