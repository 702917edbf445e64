# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
from .client import ObjectStoreClient, Session
from .exceptions import (
    AccessDeniedError,
    BucketError,
    BucketFSError,
    ConfigurationError,
    ObjectError,
    ObjectNotFoundError,
)
from .types import HeadObjectOutput, ListObjectsPage, ObjectSummary, UploadProperties

__all__ = [
    "ObjectStoreClient",
    "Session",
    "AccessDeniedError",
    "BucketError",
    "BucketFSError",
    "ConfigurationError",
    "ObjectError",
    "ObjectNotFoundError",
    "HeadObjectOutput",
    "ListObjectsPage",
    "ObjectSummary",
    "UploadProperties",
]
