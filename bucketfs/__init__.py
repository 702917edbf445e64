# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
bucketfs: a hierarchical filesystem over an S3-compatible object store.

    from bucketfs import S3Fs

    fs = S3Fs("my-bucket")
    fs.mkdir("/reports")
    with fs.create("/reports/2025.csv") as f:
        f.write(b"id,total\\n")
"""
from bucketfs.client import ObjectStoreClient, Session, UploadProperties
from bucketfs.config import FsSettings, load_settings
from bucketfs.fs import FileHandle, FileInfo, S3Fs

__version__ = "0.1.0"

__all__ = [
    "ObjectStoreClient",
    "Session",
    "UploadProperties",
    "FsSettings",
    "load_settings",
    "FileHandle",
    "FileInfo",
    "S3Fs",
]
