# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
from .errors import (
    AlreadyOpenedError,
    FileClosedError,
    InvalidSeekError,
    NotExistError,
    NotSupportedError,
    PathError,
    PermissionDeniedError,
)
from .file import FileHandle, HandleState
from .fileinfo import FileInfo
from .filesystem import S3Fs
from .lister import DirectoryLister
from .pathutil import join_prefix, sanitize
from .pipe import UploadPipe

__all__ = [
    "AlreadyOpenedError",
    "FileClosedError",
    "InvalidSeekError",
    "NotExistError",
    "NotSupportedError",
    "PathError",
    "PermissionDeniedError",
    "FileHandle",
    "HandleState",
    "FileInfo",
    "S3Fs",
    "DirectoryLister",
    "join_prefix",
    "sanitize",
    "UploadPipe",
]
