"""Payload value types decoded from server responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class ErrorDocument:
    """Structured error payload returned with a non-success status."""
    code: Optional[str] = None
    message: Optional[str] = None
    resource: Optional[str] = None
    request_id: Optional[str] = None
    host_id: Optional[str] = None
    bucket: Optional[str] = None
    key: Optional[str] = None


@dataclass(frozen=True)
class BucketInfo:
    """Bucket entry from ListBuckets."""
    name: str
    creation_date: Optional[datetime] = None


@dataclass(frozen=True)
class ObjectInfo:
    """Object entry from ListObjects."""
    name: str
    size: int = 0
    etag: Optional[str] = None
    last_modified: Optional[datetime] = None
    storage_class: Optional[str] = None


@dataclass(frozen=True)
class ListObjectsResult:
    """One page of a ListObjectsV2 listing."""
    objects: List[ObjectInfo] = field(default_factory=list)
    prefixes: List[str] = field(default_factory=list)
    is_truncated: bool = False
    next_continuation_token: Optional[str] = None


__all__ = ["ErrorDocument", "BucketInfo", "ObjectInfo", "ListObjectsResult"]
