# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Error translation module.

This module converts botocore failures into bucketfs backend exceptions.
botocore already retries transient failures according to its own
configuration, so nothing here retries; every call is attempted once at
this layer and its failure is translated and re-raised.

Functions:
    translate_errors: Decorator converting botocore errors raised by a client method.
    _convert_client_error: Helper function to convert a ClientError to a bucketfs exception.
"""
from functools import wraps
from typing import Any, Callable, Union

from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError, WaiterError

from .exceptions import (
    AccessDeniedError,
    BucketError,
    BucketFSError,
    ObjectError,
    ObjectNotFoundError,
)

NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}
ACCESS_DENIED_CODES = {"403", "AccessDenied", "Forbidden"}

def _convert_client_error(e: ClientError, operation: str = None) -> Union[BucketError, ObjectError]:
    """
    Convert a botocore ClientError to the matching bucketfs exception.

    Args:
        e (ClientError): The error raised by botocore.
        operation (str, optional): The operation being performed. Defaults to None.

    Returns:
        Union[BucketError, ObjectError]: The converted error.
    """
    error = e.response.get("Error", {})
    code = str(error.get("Code", ""))
    message = error.get("Message") or str(e)

    if code == "NoSuchBucket":
        return BucketError("Bucket does not exist", operation="ACCESS")
    if code in NOT_FOUND_CODES:
        return ObjectNotFoundError(operation=operation)
    if code in ACCESS_DENIED_CODES:
        return AccessDeniedError(operation=operation)
    if code == "EntityTooLarge":
        return ObjectError("Object size exceeds limits", operation=operation)
    return ObjectError(f"{code}: {message}" if code else message, operation=operation)

def translate_errors(operation: str) -> Callable:
    """
    Decorator converting botocore errors into bucketfs exceptions.

    Args:
        operation (str): Short operation name used in the error code (HEAD, GET, ...).

    Returns:
        Callable: A decorator that wraps the client method.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except ClientError as e:
                raise _convert_client_error(e, operation) from e
            except WaiterError as e:
                last = e.last_response or {}
                if str(last.get("Error", {}).get("Code", "")) in ACCESS_DENIED_CODES:
                    raise AccessDeniedError(operation=operation) from e
                raise ObjectNotFoundError(
                    f"Object did not become visible: {e.kwargs.get('reason', e)}", operation=operation
                ) from e
            except BotoCoreError as e:
                raise BucketFSError(f"{operation} failed: {e}", code="ERR_TRANSPORT") from e
            except Boto3Error as e:
                raise ObjectError(str(e), operation=operation) from e
        return wrapper
    return decorator
