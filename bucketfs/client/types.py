# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
import mimetypes
import posixpath
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

DEFAULT_CONTENT_TYPE = "application/octet-stream"

@dataclass
class HeadObjectOutput:
    """Metadata for an object."""
    content_type: Optional[str]
    content_length: int
    last_modified: datetime
    etag: Optional[str] = None
    cache_control: Optional[str] = None

@dataclass
class ObjectSummary:
    """One entry of the ``Contents`` part of a listing."""
    key: str
    size: int
    last_modified: datetime

@dataclass
class ListObjectsPage:
    """A single page of a delimited listing."""
    common_prefixes: List[str] = field(default_factory=list)
    contents: List[ObjectSummary] = field(default_factory=list)
    next_token: Optional[str] = None
    is_truncated: bool = False

@dataclass(frozen=True)
class UploadProperties:
    """Properties stamped on every object the filesystem creates."""
    acl: Optional[str] = None
    cache_control: Optional[str] = None
    content_type: Optional[str] = None

def guess_content_type(key: str) -> str:
    """
    Guess a Content-Type from the extension of an object key.

    Args:
        key (str): Object key or file name

    Returns:
        str: The guessed MIME type, or ``application/octet-stream``
    """
    content_type, _ = mimetypes.guess_type(posixpath.basename(key))
    return content_type or DEFAULT_CONTENT_TYPE

def upload_extra_args(key: str, props: Optional[UploadProperties]) -> Dict[str, Any]:
    """
    Build the boto3 extra arguments for a new object.

    An unset ACL is left out so the backend applies its default (private).
    An unset Content-Type is guessed from the key's extension.

    Args:
        key (str): Object key being written
        props (UploadProperties, optional): Configured upload properties

    Returns:
        dict: Keyword arguments accepted by PutObject and upload_fileobj
    """
    extra: Dict[str, Any] = {}
    if props is not None:
        if props.acl:
            extra["ACL"] = props.acl
        if props.cache_control is not None:
            extra["CacheControl"] = props.cache_control
        if props.content_type is not None:
            extra["ContentType"] = props.content_type
    if "ContentType" not in extra:
        extra["ContentType"] = guess_content_type(key)
    return extra
