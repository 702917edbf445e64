# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
class BucketFSError(Exception):
    """Base exception for bucketfs errors."""
    def __init__(self, message: str, code: str = "ERR_UNKNOWN"):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")

class BucketError(BucketFSError):
    """Bucket operation failed."""
    def __init__(self, message: str, operation: str = None):
        code = "ERR_BUCKET"
        if operation:
            code = f"ERR_BUCKET_{operation.upper()}"
        super().__init__(message, code=code)

class ObjectError(BucketFSError):
    """Object operation failed."""
    def __init__(self, message: str, operation: str = None):
        code = "ERR_OBJECT"
        if operation:
            code = f"ERR_OBJECT_{operation.upper()}"
        self.operation = operation
        super().__init__(message, code=code)

class ObjectNotFoundError(ObjectError):
    """The object (or bucket key) does not exist."""
    def __init__(self, message: str = "Object does not exist", operation: str = None):
        super().__init__(message, operation=operation)

class AccessDeniedError(ObjectError):
    """The backend refused access to the object."""
    def __init__(self, message: str = "Access denied to object", operation: str = None):
        super().__init__(message, operation=operation)

class ConfigurationError(BucketFSError):
    """Configuration or credential error."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_CONFIG")
