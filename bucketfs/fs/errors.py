# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""Filesystem-level errors raised by S3Fs and FileHandle."""
from bucketfs.client.exceptions import BucketFSError

class NotSupportedError(BucketFSError):
    """The object store has no equivalent for the requested operation."""
    def __init__(self, message: str = "s3 doesn't support this operation"):
        super().__init__(message, code="ERR_NOT_SUPPORTED")

class AlreadyOpenedError(BucketFSError):
    """A stream is already open on this handle."""
    def __init__(self, message: str = "already opened"):
        super().__init__(message, code="ERR_ALREADY_OPENED")

class InvalidSeekError(BucketFSError):
    """The seek would move the offset before the start of the file."""
    def __init__(self, offset: int):
        self.offset = offset
        super().__init__(f"invalid seek offset {offset}", code="ERR_INVALID_SEEK")

class FileClosedError(BucketFSError):
    """The handle has been closed."""
    def __init__(self, message: str = "file already closed"):
        super().__init__(message, code="ERR_FILE_CLOSED")

class PathError(BucketFSError):
    """
    A failure tied to a path.

    Attributes:
        op (str): Operation that failed (stat, open, remove, ...)
        path (str): Path the operation was applied to
        cause (Exception): Underlying error
    """
    code = "ERR_PATH"

    def __init__(self, op: str, path: str, cause: Exception):
        self.op = op
        self.path = path
        self.cause = cause
        super().__init__(f"{op} {path}: {cause}", code=type(self).code)

class NotExistError(PathError):
    """The path is neither an object nor a prefix of any object."""
    code = "ERR_NOT_EXIST"

class PermissionDeniedError(PathError):
    """The backend refused access to the path."""
    code = "ERR_PERMISSION"
