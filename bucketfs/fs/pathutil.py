# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Path normalization for bucketfs.

Caller paths are turned into forward-slash, lexically clean names. A trailing
slash is kept because it means "treat this as a directory" all the way down
to the object key (directory markers end in ``/``).
"""
import posixpath
import re

# Windows volume identifier, eg "C:"
_VOLUME_PREFIX = re.compile(r'^[A-Za-z]:')
_REPEATED_SLASHES = re.compile(r'/{2,}')

def sanitize(name):
    """
    Normalize a caller-supplied path.

    Args:
        name (str): Path as given by the caller

    Returns:
        str: The cleaned path, with its trailing slash preserved
    """
    if not name.strip():
        return name
    name = _VOLUME_PREFIX.sub('', name)
    name = name.replace('\\', '/')
    has_trailing_slash = name.endswith('/')
    name = posixpath.normpath(_REPEATED_SLASHES.sub('/', name))
    if has_trailing_slash and not name.endswith('/'):
        name += '/'
    return name

def join_prefix(prefix, key):
    """
    Join a key prefix in front of a key unless it is already there.

    Args:
        prefix (str): Configured key prefix ("" for none)
        key (str): Object key without leading slash

    Returns:
        str: The prefixed key
    """
    if not prefix:
        return key
    if not prefix.endswith('/'):
        prefix += '/'
    if key.startswith(prefix):
        return key
    return prefix + key

def is_root(name):
    """Whether a normalized name designates the filesystem root."""
    return name in ('', '.', '/', './')
