# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Settings for bucketfs, loaded from environment variables.

Credentials are not read here: boto3 resolves them itself (environment,
shared credentials file, instance role). Only the bucket, key layout and
upload properties are configured.
"""
import os
from dataclasses import dataclass
from typing import Optional

from bucketfs.client.exceptions import ConfigurationError
from bucketfs.client.types import UploadProperties

_TRUE = ('true', '1', 'yes', 'on')

@dataclass(frozen=True)
class FsSettings:
    bucket: str
    prefix: str = ""
    region: str = "us-east-1"
    endpoint_url: Optional[str] = None
    profile: Optional[str] = None
    acl: Optional[str] = None
    cache_control: Optional[str] = None
    content_type: Optional[str] = None
    raw_mode: bool = False
    create_timeout: float = 30.0

    def upload_properties(self) -> Optional[UploadProperties]:
        """Upload properties for new objects, or None when none are configured."""
        if self.acl is None and self.cache_control is None and self.content_type is None:
            return None
        return UploadProperties(
            acl=self.acl,
            cache_control=self.cache_control,
            content_type=self.content_type,
        )

def _get(name: str) -> Optional[str]:
    v = os.getenv(name)
    if v is None or not v.strip():
        return None
    return v.strip()

def load_settings(bucket: Optional[str] = None) -> FsSettings:
    """
    Load settings from env vars.

    Args:
        bucket (str, optional): Bucket name overriding BUCKETFS_BUCKET

    Returns:
        FsSettings: The loaded settings

    Raises:
        ConfigurationError: If no bucket is configured or a value is malformed
    """
    bucket = bucket or _get("BUCKETFS_BUCKET")
    if not bucket:
        raise ConfigurationError("BUCKETFS_BUCKET is required")

    timeout_raw = _get("BUCKETFS_CREATE_TIMEOUT") or "30"
    try:
        create_timeout = float(timeout_raw)
    except ValueError:
        raise ConfigurationError(f"BUCKETFS_CREATE_TIMEOUT must be a number, got {timeout_raw!r}")
    if create_timeout <= 0:
        raise ConfigurationError("BUCKETFS_CREATE_TIMEOUT must be positive")

    return FsSettings(
        bucket=bucket,
        prefix=_get("BUCKETFS_PREFIX") or "",
        region=_get("AWS_REGION") or _get("AWS_DEFAULT_REGION") or "us-east-1",
        endpoint_url=_get("BUCKETFS_ENDPOINT_URL"),
        profile=_get("AWS_PROFILE"),
        acl=_get("BUCKETFS_ACL"),
        cache_control=_get("BUCKETFS_CACHE_CONTROL"),
        content_type=_get("BUCKETFS_CONTENT_TYPE"),
        raw_mode=(_get("BUCKETFS_RAW_MODE") or "").lower() in _TRUE,
        create_timeout=create_timeout,
    )
