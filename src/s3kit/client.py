"""S3-compatible storage client.

Every operation runs the same sequence::

    Validating -> ResolvingCredentials -> Signing -> Dispatching -> Success | Failed

Each step that fails moves straight to Failed, and the failure is returned
in the operation's Response instead of being raised. There are no retries
at this layer. A request reaches the transport only once it is fully
signed.

The client keeps references to the endpoint, credential provider,
transport and codec it was built with; they stay alive for as long as the
client does. It holds no per-call state and can be shared across threads.
"""

from __future__ import annotations

import logging
import platform
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from . import operations as ops
from . import responses as r
from .args import (
    BaseArgs,
    BucketExistsArgs,
    DeleteBucketTagsArgs,
    DeleteObjectTagsArgs,
    GetBucketTagsArgs,
    GetObjectArgs,
    GetObjectTagsArgs,
    GetPresignedObjectUrlArgs,
    ListBucketsArgs,
    ListObjectsArgs,
    PutObjectArgs,
    RemoveObjectArgs,
    SetBucketTagsArgs,
    SetObjectTagsArgs,
    StatObjectArgs,
)
from .codec import XmlCodec
from .credentials import Credentials, mask_access_key, utcnow
from .endpoint import Endpoint, RequestTarget
from .errors import (
    ConfigurationError,
    CredentialError,
    Error,
    ErrorKind,
    InvalidArgumentError,
    S3KitError,
    SigningError,
    TransportError,
)
from .models import ErrorDocument
from .ports import BodyCodec, CredentialProvider, HttpResponse, Transport
from .signer import md5sum_base64, presign_v4, sha256_hash, sign_v4
from .version import CLIENT_VERSION

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0
DEFAULT_USER_AGENT = f"s3kit/{CLIENT_VERSION} (Python {platform.python_version()})"

# Codes and messages for error statuses that come without a body (HEAD)
_STATUS_ERRORS = {
    301: ("PermanentRedirect", "Moved permanently"),
    307: ("Redirect", "Redirected"),
    400: ("BadRequest", "Bad request"),
    403: ("AccessDenied", "Access denied"),
    405: ("MethodNotAllowed", "Method not allowed"),
    409: ("Conflict", "Request resource conflicts"),
    501: ("NotImplemented", "Not implemented"),
}


def _status_error(status: int, bucket: Optional[str], object_name: Optional[str]) -> tuple[str, str]:
    if status == 404:
        if object_name:
            return "NoSuchKey", "Object does not exist"
        if bucket:
            return "NoSuchBucket", "Bucket does not exist"
        return "ResourceNotFound", "Request resource not found"
    return _STATUS_ERRORS.get(status, (f"UnexpectedStatus{status}", f"Unexpected HTTP status {status}"))


class Client:
    """Client for an S3-compatible object store.

    Args:
        endpoint: Resolved endpoint (see ``Endpoint.from_url``)
        provider: Credential provider consulted on every call
        transport: HTTP transport; defaults to ``RequestsTransport``
        codec: Body codec; defaults to ``XmlCodec``
        clock: Returns the current UTC time used for signing
        timeout: Per-request deadline in seconds passed to the transport
        user_agent: User-Agent header value
    """

    def __init__(
        self,
        endpoint: Endpoint,
        provider: CredentialProvider,
        transport: Optional[Transport] = None,
        codec: Optional[BodyCodec] = None,
        clock: Optional[Callable[[], datetime]] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        user_agent: Optional[str] = None,
    ):
        if not isinstance(endpoint, Endpoint):
            raise ConfigurationError(f"endpoint must be an Endpoint, got {type(endpoint).__name__}")
        if not callable(getattr(provider, "retrieve", None)):
            raise ConfigurationError(f"provider must implement retrieve(), got {type(provider).__name__}")
        if timeout is not None and timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {timeout}")
        if transport is None:
            from .transport import RequestsTransport
            transport = RequestsTransport()

        self._endpoint = endpoint
        self._provider = provider
        self._transport = transport
        self._codec = codec or XmlCodec()
        self._clock = clock or utcnow
        self._timeout = timeout
        self._user_agent = user_agent or DEFAULT_USER_AGENT

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    @property
    def provider(self) -> CredentialProvider:
        return self._provider

    def __repr__(self) -> str:
        return f"Client(endpoint={self._endpoint.scheme}://{self._endpoint.netloc}, region={self._endpoint.region})"

    # Operations

    def bucket_exists(self, args: BucketExistsArgs) -> r.BucketExistsResponse:
        return self._execute(ops.BUCKET_EXISTS, args)

    def list_buckets(self, args: Optional[ListBucketsArgs] = None) -> r.ListBucketsResponse:
        return self._execute(ops.LIST_BUCKETS, args if args is not None else ListBucketsArgs())

    def list_objects(self, args: ListObjectsArgs) -> r.ListObjectsResponse:
        return self._execute(ops.LIST_OBJECTS, args)

    def delete_bucket_tags(self, args: DeleteBucketTagsArgs) -> r.DeleteBucketTagsResponse:
        return self._execute(ops.DELETE_BUCKET_TAGS, args)

    def get_bucket_tags(self, args: GetBucketTagsArgs) -> r.GetBucketTagsResponse:
        return self._execute(ops.GET_BUCKET_TAGS, args)

    def set_bucket_tags(self, args: SetBucketTagsArgs) -> r.SetBucketTagsResponse:
        return self._execute(ops.SET_BUCKET_TAGS, args)

    def stat_object(self, args: StatObjectArgs) -> r.StatObjectResponse:
        return self._execute(ops.STAT_OBJECT, args)

    def get_object(self, args: GetObjectArgs) -> r.GetObjectResponse:
        return self._execute(ops.GET_OBJECT, args)

    def put_object(self, args: PutObjectArgs) -> r.PutObjectResponse:
        return self._execute(ops.PUT_OBJECT, args)

    def remove_object(self, args: RemoveObjectArgs) -> r.RemoveObjectResponse:
        return self._execute(ops.REMOVE_OBJECT, args)

    def delete_object_tags(self, args: DeleteObjectTagsArgs) -> r.DeleteObjectTagsResponse:
        return self._execute(ops.DELETE_OBJECT_TAGS, args)

    def get_object_tags(self, args: GetObjectTagsArgs) -> r.GetObjectTagsResponse:
        return self._execute(ops.GET_OBJECT_TAGS, args)

    def set_object_tags(self, args: SetObjectTagsArgs) -> r.SetObjectTagsResponse:
        return self._execute(ops.SET_OBJECT_TAGS, args)

    def get_presigned_object_url(self, args: GetPresignedObjectUrlArgs) -> r.GetPresignedObjectUrlResponse:
        """Build a presigned URL; performs no network I/O."""
        response_type = r.GetPresignedObjectUrlResponse
        bucket, object_name = args.bucket or None, args.object_name or None
        try:
            args.validate()
            region = self._region_for(args)
        except InvalidArgumentError as exc:
            return self._failed(response_type, "GetPresignedObjectUrl", exc, bucket, object_name)

        try:
            credentials = self._credentials()
        except CredentialError as exc:
            return self._failed(response_type, "GetPresignedObjectUrl", exc, bucket, object_name, region)

        target = self._endpoint.target(bucket, object_name)
        query = dict(args.extra_query_params)
        if args.version_id:
            query["versionId"] = args.version_id
        try:
            params = presign_v4(
                method=args.method.upper(),
                path=target.path,
                query=query,
                host=target.host,
                credentials=credentials,
                date=self._clock(),
                region=region,
                expires=args.expires,
            )
        except SigningError as exc:
            return self._failed(response_type, "GetPresignedObjectUrl", exc, bucket, object_name, region)

        return response_type(
            bucket=bucket,
            object_name=object_name,
            region=region,
            url=self._endpoint.url(target, params),
        )

    # Dispatch

    def _region_for(self, args: BaseArgs) -> str:
        if args.region and args.region != self._endpoint.region:
            raise InvalidArgumentError(
                f"region {args.region!r} does not match endpoint region {self._endpoint.region!r}"
            )
        return self._endpoint.region

    def _credentials(self) -> Credentials:
        try:
            credentials = self._provider.retrieve()
        except CredentialError:
            raise
        except Exception as e:
            raise CredentialError(f"credential provider failed: {e}") from e
        if not isinstance(credentials, Credentials):
            raise CredentialError(
                f"provider returned {type(credentials).__name__}, expected Credentials"
            )
        if credentials.is_expired(self._clock()):
            raise CredentialError(
                f"credentials for {mask_access_key(credentials.access_key)} expired at {credentials.expires_at}"
            )
        return credentials

    def _failed(
        self,
        response_type,
        name: str,
        exc: S3KitError,
        bucket: Optional[str],
        object_name: Optional[str],
        region: Optional[str] = None,
    ):
        error = Error.from_exception(exc)
        log = logger.warning if exc.kind is ErrorKind.TRANSPORT else logger.debug
        log("%s failed: %s", name, error)
        return response_type(error=error, bucket=bucket, object_name=object_name, region=region)

    def _execute(self, op: ops.Operation, args: BaseArgs):
        bucket = getattr(args, "bucket", None) or None
        object_name = getattr(args, "object_name", None) or None

        # Validating
        try:
            args.validate()
            region = self._region_for(args)
        except InvalidArgumentError as exc:
            return self._failed(op.response_type, op.name, exc, bucket, object_name)

        # ResolvingCredentials
        try:
            credentials = self._credentials()
        except CredentialError as exc:
            return self._failed(op.response_type, op.name, exc, bucket, object_name, region)

        # Signing
        target = self._endpoint.target(bucket, object_name)
        body = op.body(args, self._codec) if op.body is not None else b""
        query = {**op.query(args), **args.extra_query_params}
        headers = self._request_headers(op, args, target, body)
        try:
            headers.update(sign_v4(
                method=op.method,
                path=target.path,
                query=query,
                headers=headers,
                content_sha256=sha256_hash(body),
                credentials=credentials,
                date=self._clock(),
                region=region,
            ))
        except SigningError as exc:
            return self._failed(op.response_type, op.name, exc, bucket, object_name, region)
        headers["User-Agent"] = self._user_agent

        # Dispatching
        url = self._endpoint.url(target, query)
        logger.debug(
            "%s: %s %s%s as %s",
            op.name, op.method, target.host, target.path, mask_access_key(credentials.access_key),
        )
        try:
            http = self._transport.send(op.method, url, headers, body or None, self._timeout)
        except TransportError as exc:
            return self._failed(op.response_type, op.name, exc, bucket, object_name, region)

        context: Dict[str, Any] = {
            "status_code": http.status,
            "headers": dict(http.headers),
            "bucket": bucket,
            "object_name": object_name,
            "region": region,
        }

        if 200 <= http.status < 300:
            try:
                payload = op.parse(args, http, self._codec)
            except ValueError as exc:
                error = Error(
                    kind=ErrorKind.SERVICE,
                    message=f"invalid {op.name} response: {exc}",
                    code="InvalidResponse",
                    resource=target.path,
                    request_id=http.headers.get("x-amz-request-id"),
                    host_id=http.headers.get("x-amz-id-2"),
                    status_code=http.status,
                )
                logger.debug("%s failed: %s", op.name, error)
                return op.response_type(error=error, **context)
            return op.response_type(**context, **payload)

        error = self._service_error(http, target, bucket, object_name)
        absorbed = op.absorb(args, error)
        if absorbed is not None:
            return op.response_type(**context, **absorbed)
        logger.debug("%s failed: %s", op.name, error)
        return op.response_type(error=error, **context)

    def _request_headers(
        self,
        op: ops.Operation,
        args: BaseArgs,
        target: RequestTarget,
        body: bytes,
    ) -> Dict[str, str]:
        headers: Dict[str, str] = {"Host": target.host}
        headers.update(op.headers(args))
        headers.update(args.extra_headers)
        if body and op.content_md5:
            headers["Content-MD5"] = md5sum_base64(body)
        return headers

    def _service_error(
        self,
        http: HttpResponse,
        target: RequestTarget,
        bucket: Optional[str],
        object_name: Optional[str],
    ) -> Error:
        document = ErrorDocument()
        if http.body:
            try:
                document = self._codec.decode_error(http.body)
            except ValueError as exc:
                logger.debug("Undecodable error body for HTTP %d: %s", http.status, exc)

        code, message = _status_error(http.status, bucket, object_name)
        return Error(
            kind=ErrorKind.SERVICE,
            message=document.message or message,
            code=document.code or code,
            resource=document.resource or target.path,
            request_id=document.request_id or http.headers.get("x-amz-request-id"),
            host_id=document.host_id or http.headers.get("x-amz-id-2"),
            status_code=http.status,
        )


__all__ = ["Client", "DEFAULT_TIMEOUT", "DEFAULT_USER_AGENT"]
