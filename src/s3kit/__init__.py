"""s3kit - signing and typed operation dispatch for S3-compatible storage."""

from .version import CLIENT_VERSION
from .errors import (
    ErrorKind,
    Error,
    S3KitError,
    InvalidArgumentError,
    ConfigurationError,
    CredentialError,
    SigningError,
    TransportError,
)
from .credentials import (
    Credentials,
    StaticProvider,
    ChainedProvider,
    RefreshingProvider,
)
from .endpoint import Endpoint, AddressingStyle, RequestTarget
from .signer import sign_v4, presign_v4
from .models import BucketInfo, ObjectInfo, ListObjectsResult, ErrorDocument
from .ports import HttpResponse, CredentialProvider, Transport, BodyCodec
from .codec import XmlCodec
from .transport import RequestsTransport
from .args import (
    BaseArgs,
    BucketArgs,
    ObjectArgs,
    ListBucketsArgs,
    BucketExistsArgs,
    ListObjectsArgs,
    DeleteBucketTagsArgs,
    GetBucketTagsArgs,
    SetBucketTagsArgs,
    StatObjectArgs,
    GetObjectArgs,
    PutObjectArgs,
    RemoveObjectArgs,
    DeleteObjectTagsArgs,
    GetObjectTagsArgs,
    SetObjectTagsArgs,
    GetPresignedObjectUrlArgs,
)
from .responses import (
    Response,
    BucketExistsResponse,
    ListBucketsResponse,
    ListObjectsResponse,
    DeleteBucketTagsResponse,
    GetBucketTagsResponse,
    SetBucketTagsResponse,
    StatObjectResponse,
    GetObjectResponse,
    PutObjectResponse,
    RemoveObjectResponse,
    DeleteObjectTagsResponse,
    GetObjectTagsResponse,
    SetObjectTagsResponse,
    GetPresignedObjectUrlResponse,
)
from .client import Client
from .config import ClientConfig
from .logging_config import configure_logging

__version__ = CLIENT_VERSION

__all__ = [
    # Version
    "CLIENT_VERSION",
    # Errors
    "ErrorKind",
    "Error",
    "S3KitError",
    "InvalidArgumentError",
    "ConfigurationError",
    "CredentialError",
    "SigningError",
    "TransportError",
    # Credentials
    "Credentials",
    "StaticProvider",
    "ChainedProvider",
    "RefreshingProvider",
    # Endpoint resolution
    "Endpoint",
    "AddressingStyle",
    "RequestTarget",
    # Signing
    "sign_v4",
    "presign_v4",
    # Payload types
    "BucketInfo",
    "ObjectInfo",
    "ListObjectsResult",
    "ErrorDocument",
    # Ports and default adapters
    "HttpResponse",
    "CredentialProvider",
    "Transport",
    "BodyCodec",
    "XmlCodec",
    "RequestsTransport",
    # Operation arguments
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
    # Operation responses
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
    # Client
    "Client",
    "ClientConfig",
    "configure_logging",
]
