# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Logging helpers shared by the filesystem and FUSE layers.

Everything logs through the ``BucketFS`` logger. The library never
configures logging itself; ``python -m bucketfs.fuse`` does, and embedding
applications attach their own handlers.

Two helpers keep call sites short:

* ``time_function`` reports how long a backend round trip took (a listing
  page or an upload) at INFO level;
* ``trace_op`` emits one DEBUG line per filesystem call with its arguments,
  only when ``BUCKETFS_TRACE_OPS`` is set or ``--trace`` was passed.
"""

import logging
import time
import os

# Per-call tracing of S3Fs, FileHandle and FUSE callbacks
TRACE_OPERATIONS = os.environ.get('BUCKETFS_TRACE_OPS', '').lower() in ('true', '1', 'yes', 'on')

logger = logging.getLogger('BucketFS')

def time_function(func_name, start_time):
    """
    Log the time elapsed since ``start_time``.

    Args:
        func_name (str): What was timed, eg "readdir page" or "upload of logs/app.log"
        start_time (float): Value of time.time() taken before the work

    Returns:
        float: Elapsed time in seconds
    """
    elapsed = time.time() - start_time
    logger.info(f"{func_name} completed in {elapsed:.4f} seconds")
    return elapsed

def trace_op(operation, path, **details):
    """
    Log a filesystem call when tracing is enabled.

    Details whose value is None are left out, so optional arguments such as
    an absent FUSE file handle do not clutter the line.

    Args:
        operation (str): Name of the call (stat, open_file, write, ...)
        path (str): Path as given by the caller, before sanitizing
        **details: Call arguments worth recording (offsets, sizes, flags)
    """
    if not TRACE_OPERATIONS:
        return
    detail_str = ', '.join(f"{k}={v}" for k, v in details.items() if v is not None)
    logger.debug(f"TRACE: {operation} {path} {detail_str}".rstrip())
