# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Object store client.

This module wraps a boto3 S3 client behind the small set of calls the
filesystem layer needs: HEAD, ranged GET, PUT, streaming multipart upload,
delimited LIST, COPY, DELETE, ACL updates and an existence waiter.
All botocore failures are translated into bucketfs exceptions.

Classes:
    Session: Connection settings for the backend.
    ObjectStoreClient: The backend client used by the filesystem.
"""
import math
from dataclasses import dataclass
from typing import Any, BinaryIO, Dict, Optional, Tuple

import boto3
from boto3.s3.transfer import TransferConfig
from botocore.config import Config

from .errors import translate_errors
from .types import (
    HeadObjectOutput,
    ListObjectsPage,
    ObjectSummary,
    UploadProperties,
    upload_extra_args,
)

# S3 refuses multipart parts smaller than 5 MiB (except the last one)
PART_SIZE = 5 * 1024 * 1024
WAIT_MAX_DELAY = 5.0

@dataclass
class Session:
    """
    Connection settings for the object store.

    Attributes:
        region (str): Region of the bucket
        endpoint_url (str, optional): Custom endpoint (MinIO, localstack, ...)
        profile (str, optional): Named AWS profile used for credentials
    """
    region: str = "us-east-1"
    endpoint_url: Optional[str] = None
    profile: Optional[str] = None

class ObjectStoreClient:
    """
    Client for the object store backing a bucketfs filesystem.

    Attributes:
        session (Session): Connection settings
    """

    def __init__(self, session: Optional[Session] = None, s3_client: Any = None):
        """
        Initialize the client.

        Args:
            session (Session, optional): Connection settings. Defaults to Session().
            s3_client (optional): An existing boto3 S3 client to use instead of
                building one from the session.
        """
        self.session = session or Session()
        if s3_client is None:
            s3_client = self._build_s3_client(self.session)
        self._s3 = s3_client

    @staticmethod
    def _build_s3_client(session: Session) -> Any:
        cfg = Config(
            region_name=session.region,
            retries={"max_attempts": 5, "mode": "standard"},
            s3={"addressing_style": "path"} if session.endpoint_url else None,
        )
        boto_session = boto3.session.Session(profile_name=session.profile)
        return boto_session.client("s3", endpoint_url=session.endpoint_url, config=cfg)

    @property
    def s3(self) -> Any:
        """The underlying boto3 client."""
        return self._s3

    def close(self) -> None:
        """Release the connection pool of the underlying client."""
        close = getattr(self._s3, "close", None)
        if callable(close):
            close()

    @translate_errors("HEAD")
    def head_object(self, bucket: str, key: str) -> HeadObjectOutput:
        """
        Fetch the metadata of an object.

        Args:
            bucket (str): Bucket name
            key (str): Object key

        Returns:
            HeadObjectOutput: Size, modification time and content headers

        Raises:
            ObjectNotFoundError: If the object does not exist
        """
        resp = self._s3.head_object(Bucket=bucket, Key=key)
        return HeadObjectOutput(
            content_type=resp.get("ContentType"),
            content_length=resp.get("ContentLength", 0),
            last_modified=resp["LastModified"],
            etag=resp.get("ETag"),
            cache_control=resp.get("CacheControl"),
        )

    @translate_errors("GET")
    def get_object(self, bucket: str, key: str, byte_range: Optional[Tuple[int, int]] = None) -> BinaryIO:
        """
        Open a streaming GET on an object.

        Args:
            bucket (str): Bucket name
            key (str): Object key
            byte_range (tuple, optional): Inclusive ``(first, last)`` byte offsets

        Returns:
            A readable stream (botocore StreamingBody); the caller must close it.
        """
        kwargs: Dict[str, Any] = {"Bucket": bucket, "Key": key}
        if byte_range is not None:
            kwargs["Range"] = f"bytes={byte_range[0]}-{byte_range[1]}"
        return self._s3.get_object(**kwargs)["Body"]

    @translate_errors("PUT")
    def put_object(self, bucket: str, key: str, data: bytes, props: Optional[UploadProperties] = None) -> None:
        """
        Store a whole object in a single request.

        Args:
            bucket (str): Bucket name
            key (str): Object key
            data (bytes): Object body
            props (UploadProperties, optional): ACL, Cache-Control and Content-Type
        """
        self._s3.put_object(Bucket=bucket, Key=key, Body=data, **upload_extra_args(key, props))

    @translate_errors("UPLOAD")
    def upload_stream(self, bucket: str, key: str, stream: BinaryIO, concurrency: int = 1,
                      props: Optional[UploadProperties] = None) -> None:
        """
        Upload a non-seekable stream, using multipart upload past one part.

        With ``concurrency == 1`` parts are read and sent one at a time on the
        calling thread, so parts are uploaded in stream order and at most one
        part is held in memory.

        Args:
            bucket (str): Bucket name
            key (str): Object key
            stream: Readable object; ``read(n)`` must return n bytes unless at end of data
            concurrency (int): Number of concurrent part uploads
            props (UploadProperties, optional): ACL, Cache-Control and Content-Type
        """
        config = TransferConfig(
            multipart_threshold=PART_SIZE,
            multipart_chunksize=PART_SIZE,
            max_concurrency=concurrency,
            use_threads=concurrency > 1,
        )
        self._s3.upload_fileobj(
            stream, bucket, key,
            ExtraArgs=upload_extra_args(key, props),
            Config=config,
        )

    @translate_errors("LIST")
    def list_objects(self, bucket: str, prefix: str = "", delimiter: Optional[str] = None,
                     continuation_token: Optional[str] = None, max_keys: int = 1000) -> ListObjectsPage:
        """
        Fetch one page of a (delimited) listing.

        Args:
            bucket (str): Bucket name
            prefix (str): Only keys starting with this prefix are listed
            delimiter (str, optional): Groups keys into common prefixes
            continuation_token (str, optional): Token from the previous page
            max_keys (int): Maximum number of entries (keys plus prefixes)

        Returns:
            ListObjectsPage: Common prefixes, contents and the next token
        """
        kwargs: Dict[str, Any] = {"Bucket": bucket, "MaxKeys": max_keys}
        if prefix:
            kwargs["Prefix"] = prefix
        if delimiter:
            kwargs["Delimiter"] = delimiter
        if continuation_token:
            kwargs["ContinuationToken"] = continuation_token
        resp = self._s3.list_objects_v2(**kwargs)
        return ListObjectsPage(
            common_prefixes=[p["Prefix"] for p in resp.get("CommonPrefixes") or []],
            contents=[
                ObjectSummary(key=o["Key"], size=o.get("Size", 0), last_modified=o["LastModified"])
                for o in resp.get("Contents") or []
            ],
            next_token=resp.get("NextContinuationToken"),
            is_truncated=bool(resp.get("IsTruncated")),
        )

    @translate_errors("COPY")
    def copy_object(self, bucket: str, src_key: str, dst_key: str) -> None:
        """Server-side copy of ``src_key`` to ``dst_key`` within a bucket."""
        self._s3.copy_object(
            Bucket=bucket,
            Key=dst_key,
            CopySource={"Bucket": bucket, "Key": src_key},
        )

    @translate_errors("DELETE")
    def delete_object(self, bucket: str, key: str) -> None:
        """Delete an object. Deleting a missing key is not an error on S3."""
        self._s3.delete_object(Bucket=bucket, Key=key)

    @translate_errors("ACL")
    def put_object_acl(self, bucket: str, key: str, acl: str) -> None:
        """Apply a canned ACL to an existing object."""
        self._s3.put_object_acl(Bucket=bucket, Key=key, ACL=acl)

    @translate_errors("WAIT")
    def wait_until_exists(self, bucket: str, key: str, timeout: float = 30.0) -> None:
        """
        Poll HEAD until the object is visible or the timeout elapses.

        Args:
            bucket (str): Bucket name
            key (str): Object key
            timeout (float): Upper bound in seconds

        Raises:
            ObjectNotFoundError: If the object is still invisible after the timeout
        """
        delay = max(min(WAIT_MAX_DELAY, timeout), 0.1)
        attempts = max(1, int(math.ceil(timeout / delay)))
        waiter = self._s3.get_waiter("object_exists")
        waiter.wait(Bucket=bucket, Key=key, WaiterConfig={"Delay": delay, "MaxAttempts": attempts})
