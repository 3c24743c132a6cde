"""The closed set of storage operations.

Each ``Operation`` describes how to turn validated Args into an HTTP
request (method, query, headers, body) and how to turn a successful HTTP
response into the typed Response payload. Adding an operation means adding
an Args/Response pair and one entry here; the client's dispatch sequence
is shared by all of them.
"""

from __future__ import annotations

from dataclasses import dataclass
from email.utils import parsedate_to_datetime
from typing import Any, Callable, Dict, Mapping, Optional, Type

from . import responses as r
from .errors import Error
from .ports import BodyCodec, HttpResponse

Payload = Dict[str, Any]

_USER_METADATA_PREFIX = "x-amz-meta-"


def _no_query(args) -> Dict[str, str]:
    return {}


def _no_headers(args) -> Dict[str, str]:
    return {}


def _no_payload(args, response: HttpResponse, codec: BodyCodec) -> Payload:
    return {}


def _no_absorb(args, error: Error) -> Optional[Payload]:
    return None


@dataclass(frozen=True)
class Operation:
    """Request/response mapping for one storage operation.

    Attributes:
        name: API name, e.g. "DeleteBucketTags"
        method: HTTP method
        response_type: Response class produced by the operation
        query: Operation query parameters from args
        headers: Operation headers from args
        body: Request body from args, encoded with the codec
        parse: Payload fields from a successful HTTP response
        absorb: Payload fields for service errors that count as success
            (e.g. NoSuchTagSet means "no tags"); None keeps the failure
        content_md5: Send a Content-MD5 header for the body
    """
    name: str
    method: str
    response_type: Type[r.Response]
    query: Callable[[Any], Dict[str, str]] = _no_query
    headers: Callable[[Any], Dict[str, str]] = _no_headers
    body: Optional[Callable[[Any, BodyCodec], bytes]] = None
    parse: Callable[[Any, HttpResponse, BodyCodec], Payload] = _no_payload
    absorb: Callable[[Any, Error], Optional[Payload]] = _no_absorb
    content_md5: bool = False


def _etag(headers: Mapping[str, str]) -> Optional[str]:
    value = headers.get("etag")
    return value.strip('"') if value else None


def _version_query(args) -> Dict[str, str]:
    return {"versionId": args.version_id} if args.version_id else {}


def _tagging_query(args) -> Dict[str, str]:
    query = {"tagging": ""}
    if getattr(args, "version_id", None):
        query["versionId"] = args.version_id
    return query


def _parse_tags(args, response: HttpResponse, codec: BodyCodec) -> Payload:
    return {"tags": codec.decode_tags(response.body)}


def _encode_tags(args, codec: BodyCodec) -> bytes:
    return codec.encode_tags(args.tags)


def _absorb_code(code: str, payload: Payload) -> Callable[[Any, Error], Optional[Payload]]:
    def absorb(args, error: Error) -> Optional[Payload]:
        return dict(payload) if error.code == code else None
    return absorb


def _list_objects_query(args) -> Dict[str, str]:
    query = {"list-type": "2", "max-keys": str(args.max_keys)}
    for name, value in (
        ("prefix", args.prefix),
        ("delimiter", args.delimiter),
        ("continuation-token", args.continuation_token),
        ("start-after", args.start_after),
    ):
        if value is not None:
            query[name] = value
    return query


def _parse_list_objects(args, response: HttpResponse, codec: BodyCodec) -> Payload:
    result = codec.decode_list_objects(response.body)
    return {
        "objects": result.objects,
        "prefixes": result.prefixes,
        "is_truncated": result.is_truncated,
        "next_continuation_token": result.next_continuation_token,
    }


def _parse_stat(args, response: HttpResponse, codec: BodyCodec) -> Payload:
    headers = response.headers
    size = headers.get("content-length")
    modified = headers.get("last-modified")
    try:
        last_modified = parsedate_to_datetime(modified) if modified else None
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid Last-Modified header: {modified}") from e
    return {
        "etag": _etag(headers),
        "size": int(size) if size is not None else None,
        "last_modified": last_modified,
        "content_type": headers.get("content-type"),
        "version_id": headers.get("x-amz-version-id"),
        "user_metadata": {
            name[len(_USER_METADATA_PREFIX):]: value
            for name, value in headers.items()
            if name.startswith(_USER_METADATA_PREFIX)
        },
    }


def _range_header(args) -> Dict[str, str]:
    if not args.offset and args.length is None:
        return {}
    end = "" if args.length is None else str(args.offset + args.length - 1)
    return {"Range": f"bytes={args.offset}-{end}"}


def _put_object_headers(args) -> Dict[str, str]:
    headers = {"Content-Type": args.content_type}
    for key, value in args.user_metadata.items():
        headers[_USER_METADATA_PREFIX + key.lower()] = value
    return headers


BUCKET_EXISTS = Operation(
    name="BucketExists",
    method="HEAD",
    response_type=r.BucketExistsResponse,
    parse=lambda args, response, codec: {"exists": True},
    absorb=_absorb_code("NoSuchBucket", {"exists": False}),
)

LIST_BUCKETS = Operation(
    name="ListBuckets",
    method="GET",
    response_type=r.ListBucketsResponse,
    parse=lambda args, response, codec: {"buckets": codec.decode_list_buckets(response.body)},
)

LIST_OBJECTS = Operation(
    name="ListObjects",
    method="GET",
    response_type=r.ListObjectsResponse,
    query=_list_objects_query,
    parse=_parse_list_objects,
)

DELETE_BUCKET_TAGS = Operation(
    name="DeleteBucketTags",
    method="DELETE",
    response_type=r.DeleteBucketTagsResponse,
    query=_tagging_query,
)

GET_BUCKET_TAGS = Operation(
    name="GetBucketTags",
    method="GET",
    response_type=r.GetBucketTagsResponse,
    query=_tagging_query,
    parse=_parse_tags,
    absorb=_absorb_code("NoSuchTagSet", {"tags": {}}),
)

SET_BUCKET_TAGS = Operation(
    name="SetBucketTags",
    method="PUT",
    response_type=r.SetBucketTagsResponse,
    query=_tagging_query,
    body=_encode_tags,
    content_md5=True,
)

STAT_OBJECT = Operation(
    name="StatObject",
    method="HEAD",
    response_type=r.StatObjectResponse,
    query=_version_query,
    parse=_parse_stat,
)

GET_OBJECT = Operation(
    name="GetObject",
    method="GET",
    response_type=r.GetObjectResponse,
    query=_version_query,
    headers=_range_header,
    parse=lambda args, response, codec: {
        "data": response.body,
        "etag": _etag(response.headers),
        "content_type": response.headers.get("content-type"),
    },
)

PUT_OBJECT = Operation(
    name="PutObject",
    method="PUT",
    response_type=r.PutObjectResponse,
    headers=_put_object_headers,
    body=lambda args, codec: bytes(args.data),
    parse=lambda args, response, codec: {
        "etag": _etag(response.headers),
        "version_id": response.headers.get("x-amz-version-id"),
    },
)

REMOVE_OBJECT = Operation(
    name="RemoveObject",
    method="DELETE",
    response_type=r.RemoveObjectResponse,
    query=_version_query,
    parse=lambda args, response, codec: {"version_id": response.headers.get("x-amz-version-id")},
)

DELETE_OBJECT_TAGS = Operation(
    name="DeleteObjectTags",
    method="DELETE",
    response_type=r.DeleteObjectTagsResponse,
    query=_tagging_query,
)

GET_OBJECT_TAGS = Operation(
    name="GetObjectTags",
    method="GET",
    response_type=r.GetObjectTagsResponse,
    query=_tagging_query,
    parse=_parse_tags,
)

SET_OBJECT_TAGS = Operation(
    name="SetObjectTags",
    method="PUT",
    response_type=r.SetObjectTagsResponse,
    query=_tagging_query,
    body=_encode_tags,
    content_md5=True,
)

OPERATIONS: Dict[str, Operation] = {
    op.name: op
    for op in (
        BUCKET_EXISTS,
        LIST_BUCKETS,
        LIST_OBJECTS,
        DELETE_BUCKET_TAGS,
        GET_BUCKET_TAGS,
        SET_BUCKET_TAGS,
        STAT_OBJECT,
        GET_OBJECT,
        PUT_OBJECT,
        REMOVE_OBJECT,
        DELETE_OBJECT_TAGS,
        GET_OBJECT_TAGS,
        SET_OBJECT_TAGS,
    )
}


__all__ = ["Operation", "OPERATIONS"]
