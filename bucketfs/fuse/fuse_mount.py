# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
FUSE adapter for bucketfs.

This module exposes an S3Fs as a local filesystem through fusepy. Every
callback is a thin translation onto S3Fs and FileHandle. Operations the
object store cannot express, such as appends or setting timestamps, fail
with ENOTSUP.

Usage:
    # Create a mount point
    mkdir -p /mnt/my-bucket

    # Mount the bucket
    python -m bucketfs.fuse my-bucket /mnt/my-bucket

    # Files written sequentially and read back at any offset
    cp report.csv /mnt/my-bucket/reports/
    tail -c 100 /mnt/my-bucket/reports/report.csv
"""

from fuse import FUSE, FuseOSError, Operations
import errno
import itertools
import logging
import os
import stat
import sys
import time
from functools import wraps
from threading import Lock

from bucketfs.config import load_settings
from bucketfs.fs.errors import (
    FileClosedError,
    InvalidSeekError,
    NotExistError,
    NotSupportedError,
    PermissionDeniedError,
)
from bucketfs.fs.filesystem import S3Fs
from bucketfs.fs.utils import logger, time_function, trace_op
from .mount_utils import unmount, setup_signal_handlers, get_mount_options

def _fuse_errors(func):
    """Translate bucketfs exceptions raised by a FUSE callback into errno codes."""
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except FuseOSError:
            raise
        except NotExistError:
            raise FuseOSError(errno.ENOENT)
        except PermissionDeniedError:
            raise FuseOSError(errno.EACCES)
        except NotSupportedError:
            raise FuseOSError(errno.ENOTSUP)
        except InvalidSeekError:
            raise FuseOSError(errno.EINVAL)
        except FileClosedError:
            raise FuseOSError(errno.EBADF)
        except Exception as e:
            logger.error(f"{func.__name__} failed for {args[:1]}: {e}", exc_info=True)
            raise FuseOSError(errno.EIO)
    return wrapper

class BucketFuse(Operations):
    """
    FUSE operations backed by an S3Fs.

    Open files are tracked in a handle table keyed by the integer file
    handle given back to the kernel.

    Attributes:
        fs (S3Fs): The filesystem being exposed
    """

    def __init__(self, fs):
        self.fs = fs
        self._handles = {}
        self._handles_lock = Lock()
        self._fh_counter = itertools.count(1)

    def _add_handle(self, handle):
        with self._handles_lock:
            fh = next(self._fh_counter)
            self._handles[fh] = handle
        return fh

    def _get_handle(self, fh):
        with self._handles_lock:
            handle = self._handles.get(fh)
        if handle is None:
            raise FuseOSError(errno.EBADF)
        return handle

    def _pop_handle(self, fh):
        with self._handles_lock:
            return self._handles.pop(fh, None)

    @_fuse_errors
    def getattr(self, path, fh=None):
        """
        Get file attributes.

        Args:
            path (str): Path to the file or directory
            fh (int, optional): File handle

        Returns:
            dict: File attributes
        """
        trace_op("getattr", path, fh=fh)
        info = self.fs.stat(path)
        mtime = info.mod_time.timestamp()
        kind = stat.S_IFDIR if info.is_dir else stat.S_IFREG
        return {
            'st_mode': kind | info.mode,
            'st_nlink': 2 if info.is_dir else 1,
            'st_size': info.size,
            'st_mtime': mtime,
            'st_atime': mtime,
            'st_ctime': mtime,
            'st_uid': os.getuid(),
            'st_gid': os.getgid(),
        }

    @_fuse_errors
    def readdir(self, path, fh):
        trace_op("readdir", path, fh=fh)
        start_time = time.time()
        with self.fs.open(path) as directory:
            names = directory.readdirnames(0)
        time_function("readdir", start_time)
        return ['.', '..'] + names

    @_fuse_errors
    def open(self, path, flags):
        """
        Open a file. Only the access mode and append bit are passed on;
        read-write and append opens fail with ENOTSUP.
        """
        trace_op("open", path, flags=flags)
        handle = self.fs.open_file(path, flags & (os.O_ACCMODE | os.O_APPEND))
        return self._add_handle(handle)

    @_fuse_errors
    def create(self, path, mode, fi=None):
        trace_op("create", path, mode=oct(mode))
        return self._add_handle(self.fs.create(path))

    @_fuse_errors
    def read(self, path, size, offset, fh):
        trace_op("read", path, size=size, offset=offset, fh=fh)
        return self._get_handle(fh).read_at(size, offset)

    @_fuse_errors
    def write(self, path, data, offset, fh):
        """
        Append data to a file open for writing.

        Raises:
            FuseOSError: ENOTSUP if ``offset`` is not the current end of the file
        """
        trace_op("write", path, offset=offset, size=len(data))
        handle = self._get_handle(fh)
        if offset != handle.tell():
            logger.warning(f"write: non-sequential write to {path} at {offset}, expected {handle.tell()}")
            raise FuseOSError(errno.ENOTSUP)
        return handle.write(data)

    def flush(self, path, fh):
        return 0

    @_fuse_errors
    def fsync(self, path, datasync, fh):
        self._get_handle(fh).sync()
        return 0

    @_fuse_errors
    def release(self, path, fh):
        """Close the handle; for written files this waits for the upload."""
        trace_op("release", path, fh=fh)
        handle = self._pop_handle(fh)
        if handle is not None:
            handle.close()
        return 0

    @_fuse_errors
    def mkdir(self, path, mode):
        self.fs.mkdir(path, mode)

    @_fuse_errors
    def rmdir(self, path):
        if not self.fs.stat(path).is_dir:
            raise FuseOSError(errno.ENOTDIR)
        with self.fs.open(path) as directory:
            if directory.readdirnames(0):
                raise FuseOSError(errno.ENOTEMPTY)
        self.fs.remove(path)

    @_fuse_errors
    def unlink(self, path):
        self.fs.remove(path)

    @_fuse_errors
    def rename(self, old, new):
        self.fs.rename(old, new)

    @_fuse_errors
    def chmod(self, path, mode):
        self.fs.chmod(path, mode)

    @_fuse_errors
    def chown(self, path, uid, gid):
        self.fs.chown(path, uid, gid)

    @_fuse_errors
    def utimens(self, path, times=None):
        atime, mtime = times if times else (time.time(), time.time())
        self.fs.chtimes(path, atime, mtime)

    @_fuse_errors
    def truncate(self, path, length, fh=None):
        raise NotSupportedError("truncate is not supported")

def mount(bucket, mountpoint, foreground=True, allow_other=False):
    """
    Mount a bucket at a local directory.

    Settings other than the bucket (prefix, endpoint, upload properties)
    come from the BUCKETFS_* environment variables.

    Args:
        bucket (str): Name of the bucket to mount
        mountpoint (str): Directory to mount on
        foreground (bool, optional): Run in foreground. Defaults to True.
        allow_other (bool, optional): Allow other users to access the mount. Defaults to False.
    """
    logger.info(f"Mounting bucket {bucket} at {mountpoint}")
    start_time = time.time()
    fs = S3Fs.from_settings(load_settings(bucket))
    setup_signal_handlers(mountpoint, unmount)
    try:
        FUSE(BucketFuse(fs), mountpoint, **get_mount_options(foreground, allow_other))
    finally:
        fs.client.close()
        time_function("mount", start_time)

def main():
    """
    CLI entry point for mounting buckets.

    Usage:
        python -m bucketfs.fuse <bucket> <mountpoint>

    Options:
        --allow-other: Allow other users to access the mount
            (requires user_allow_other in /etc/fuse.conf)
        --trace: Enable detailed tracing of file operations for debugging
    """
    import argparse
    parser = argparse.ArgumentParser(description='Mount an S3 bucket as a local filesystem')
    parser.add_argument('bucket', help='The name of the bucket to mount')
    parser.add_argument('mountpoint', help='The directory to mount the bucket on')
    parser.add_argument('--allow-other', action='store_true',
                        help='Allow other users to access the mount (requires user_allow_other in /etc/fuse.conf)')
    parser.add_argument('--trace', action='store_true',
                        help='Enable detailed tracing of file operations for debugging')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.trace else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s] - %(message)s'
    )
    if args.trace:
        # utils reads the flag at import time
        import bucketfs.fs.utils as fs_utils
        fs_utils.TRACE_OPERATIONS = True

    logger.info(f"Starting bucketfs FUSE CLI with arguments: {sys.argv}")
    mount(args.bucket, args.mountpoint, allow_other=args.allow_other)

if __name__ == '__main__':
    main()
