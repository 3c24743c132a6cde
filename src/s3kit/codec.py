"""XML body codec for the S3 REST API.

Element lookups ignore XML namespaces: AWS documents carry the
``http://s3.amazonaws.com/doc/2006-03-01/`` namespace, error documents and
some S3-compatible servers do not.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional

from .models import BucketInfo, ErrorDocument, ListObjectsResult, ObjectInfo

S3_NAMESPACE = "http://s3.amazonaws.com/doc/2006-03-01/"


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _parse(body: bytes, root_name: str) -> ET.Element:
    if not body:
        raise ValueError(f"empty body, expected <{root_name}> document")
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise ValueError(f"malformed XML: {e}") from e
    if _local(root.tag) != root_name:
        raise ValueError(f"expected <{root_name}> document, got <{_local(root.tag)}>")
    return root


def _find(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if _local(child.tag) == name:
            return child
    return None


def _findall(element: ET.Element, name: str) -> List[ET.Element]:
    return [child for child in element if _local(child.tag) == name]


def _findtext(element: ET.Element, name: str, strict: bool = False) -> Optional[str]:
    child = _find(element, name)
    if child is None:
        if strict:
            raise ValueError(f"<{_local(element.tag)}> has no <{name}> element")
        return None
    return child.text or ""


def parse_iso8601(value: Optional[str]) -> Optional[datetime]:
    """Parse S3 timestamps such as 2009-10-12T17:50:30.000Z."""
    if not value:
        return None
    for fmt in ("%Y-%m-%dT%H:%M:%S.%fZ", "%Y-%m-%dT%H:%M:%SZ"):
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    raise ValueError(f"invalid ISO-8601 timestamp: {value}")


class XmlCodec:
    """Default ``BodyCodec`` implementation."""

    def decode_error(self, body: bytes) -> ErrorDocument:
        root = _parse(body, "Error")
        return ErrorDocument(
            code=_findtext(root, "Code"),
            message=_findtext(root, "Message"),
            resource=_findtext(root, "Resource"),
            request_id=_findtext(root, "RequestId"),
            host_id=_findtext(root, "HostId"),
            bucket=_findtext(root, "BucketName"),
            key=_findtext(root, "Key"),
        )

    def encode_tags(self, tags: Mapping[str, str]) -> bytes:
        root = ET.Element("Tagging", xmlns=S3_NAMESPACE)
        tag_set = ET.SubElement(root, "TagSet")
        for key, value in tags.items():
            tag = ET.SubElement(tag_set, "Tag")
            ET.SubElement(tag, "Key").text = key
            ET.SubElement(tag, "Value").text = value
        return ET.tostring(root, encoding="utf-8")

    def decode_tags(self, body: bytes) -> Dict[str, str]:
        root = _parse(body, "Tagging")
        tag_set = _find(root, "TagSet")
        if tag_set is None:
            return {}
        return {
            _findtext(tag, "Key", strict=True): _findtext(tag, "Value") or ""
            for tag in _findall(tag_set, "Tag")
        }

    def decode_list_buckets(self, body: bytes) -> List[BucketInfo]:
        root = _parse(body, "ListAllMyBucketsResult")
        buckets = _find(root, "Buckets")
        if buckets is None:
            return []
        return [
            BucketInfo(
                name=_findtext(bucket, "Name", strict=True),
                creation_date=parse_iso8601(_findtext(bucket, "CreationDate")),
            )
            for bucket in _findall(buckets, "Bucket")
        ]

    def decode_list_objects(self, body: bytes) -> ListObjectsResult:
        root = _parse(body, "ListBucketResult")
        objects = []
        for content in _findall(root, "Contents"):
            size = _findtext(content, "Size")
            objects.append(ObjectInfo(
                name=_findtext(content, "Key", strict=True),
                size=int(size) if size else 0,
                etag=(_findtext(content, "ETag") or "").strip('"') or None,
                last_modified=parse_iso8601(_findtext(content, "LastModified")),
                storage_class=_findtext(content, "StorageClass"),
            ))
        prefixes = [
            _findtext(prefix, "Prefix", strict=True)
            for prefix in _findall(root, "CommonPrefixes")
        ]
        return ListObjectsResult(
            objects=objects,
            prefixes=prefixes,
            is_truncated=(_findtext(root, "IsTruncated") or "").lower() == "true",
            next_continuation_token=_findtext(root, "NextContinuationToken"),
        )


__all__ = ["XmlCodec", "parse_iso8601", "S3_NAMESPACE"]
