# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Filesystem facade over an object store bucket.

S3Fs exposes create/open/mkdir/remove/rename/stat/chmod over a bucket that
only knows whole objects. Directories are never stored as entities: a
directory is either a zero-byte marker object whose key ends in ``/``, or is
inferred from any key sharing its prefix. Rename and recursive removal are
sequences of independent backend calls and are not atomic.

Usage:
    fs = S3Fs("my-bucket")
    with fs.open_file("/logs/app.log", os.O_WRONLY) as f:
        f.write(b"hello")
    with fs.open("/logs/app.log") as f:
        f.read()
"""

import os
import posixpath
import time
from contextlib import contextmanager

from bucketfs.client.client import ObjectStoreClient, Session
from bucketfs.client.exceptions import AccessDeniedError, ObjectNotFoundError
from .errors import NotExistError, NotSupportedError, PathError, PermissionDeniedError
from .file import FileHandle
from .fileinfo import EPOCH, FileInfo
from .pathutil import is_root, join_prefix, sanitize
from .utils import logger, time_function, trace_op

DEFAULT_CREATE_TIMEOUT = 30.0

@contextmanager
def _path_context(op, name):
    """Wrap not-found and access-denied backend errors with path context."""
    try:
        yield
    except ObjectNotFoundError as e:
        raise NotExistError(op, name, e) from e
    except AccessDeniedError as e:
        raise PermissionDeniedError(op, name, e) from e

class S3Fs:
    """
    A filesystem backed by one object store bucket.

    The instance is configuration only (bucket, client, upload properties,
    key prefix) and is never mutated after construction, so any number of
    FileHandles may share it.

    Attributes:
        bucket (str): Bucket name
        client (ObjectStoreClient): Backend client
        file_props (UploadProperties): Properties applied to every new object
        prefix (str): Key prefix every name is mapped under
        raw_mode (bool): Skip path sanitization
        create_timeout (float): Seconds ``create`` waits for the object to be visible
    """

    def __init__(self, bucket, client=None, file_props=None, prefix="", raw_mode=False,
                 create_timeout=DEFAULT_CREATE_TIMEOUT):
        self.bucket = bucket
        self.client = client or ObjectStoreClient()
        self.file_props = file_props
        self.prefix = prefix.strip('/') + '/' if prefix.strip('/') else ""
        self.raw_mode = raw_mode
        self.create_timeout = create_timeout
        logger.info(f"S3Fs initialized for bucket {bucket} (prefix='{self.prefix}')")

    @classmethod
    def from_settings(cls, settings, client=None):
        """
        Build a filesystem from FsSettings.

        Args:
            settings (FsSettings): Loaded settings
            client (ObjectStoreClient, optional): Client to use instead of one built from the settings

        Returns:
            S3Fs: The configured filesystem
        """
        if client is None:
            client = ObjectStoreClient(Session(
                region=settings.region,
                endpoint_url=settings.endpoint_url,
                profile=settings.profile,
            ))
        return cls(
            settings.bucket,
            client=client,
            file_props=settings.upload_properties(),
            prefix=settings.prefix,
            raw_mode=settings.raw_mode,
            create_timeout=settings.create_timeout,
        )

    def name(self):
        """Type of filesystem this is."""
        return "s3"

    def sanitize(self, name):
        if self.raw_mode:
            return name
        return sanitize(name)

    def key(self, name):
        """
        Map a normalized name to its object key.

        Args:
            name (str): Normalized name

        Returns:
            str: Key with leading slash removed and prefix joined in
        """
        key = name.lstrip('/')
        if key in ('.', './'):
            key = ''
        return join_prefix(self.prefix, key)

    # Creating and opening

    def create(self, name):
        """
        Create (or truncate) a file and open it for writing.

        An empty object is stored right away, then the call waits until the
        backend reports it, so a ``stat`` right after ``create`` sees it.

        Args:
            name (str): Path of the file

        Returns:
            FileHandle: Handle open for writing
        """
        trace_op("create", name)
        start_time = time.time()
        name = self.sanitize(name)
        key = self.key(name)
        with _path_context("create", name):
            self.client.put_object(self.bucket, key, b"", self.file_props)
            handle = self.open_file(name, os.O_WRONLY, 0o750)
            self.client.wait_until_exists(self.bucket, key, self.create_timeout)
        time_function("create", start_time)
        return handle

    def mkdir(self, name, perm=0o755):
        """
        Create a directory by storing its zero-byte marker ``name/``.

        Args:
            name (str): Path of the directory
            perm (int): Ignored
        """
        trace_op("mkdir", name, perm=oct(perm))
        name = self.sanitize(name)
        if is_root(name):
            return
        marker = name.rstrip('/') + '/'
        handle = self.open_file(marker, os.O_CREAT, perm)
        handle.close()

    def mkdir_all(self, name, perm=0o755):
        """Same as mkdir: parent directories exist implicitly."""
        self.mkdir(name, perm)

    def open(self, name):
        """Open a file or directory for reading."""
        return self.open_file(name, os.O_RDONLY, 0o777)

    def open_file(self, name, flags, perm=0o644):
        """
        Open a file with ``os.O_*`` flags.

        Args:
            name (str): Path of the file
            flags (int): os.O_RDONLY, os.O_WRONLY, os.O_CREAT; os.O_RDWR and
                os.O_APPEND are rejected
            perm (int): Ignored

        Returns:
            FileHandle: The open handle

        Raises:
            NotSupportedError: For read-write or append access
            NotExistError: If a file opened for reading does not exist
        """
        trace_op("open_file", name, flags=flags)
        name = self.sanitize(name)

        # a handle holds either a read stream or an upload, never both
        if flags & os.O_RDWR:
            raise NotSupportedError("read-write access is not supported")
        # objects cannot be extended in place
        if flags & os.O_APPEND:
            raise NotSupportedError("append is not supported")
        # O_CREAT implies writing
        if flags & os.O_CREAT:
            flags |= os.O_WRONLY

        handle = FileHandle(self, name)
        if flags & os.O_WRONLY:
            handle.open_write_stream()
            return handle

        handle._open_read(self.stat(name))
        return handle

    # Metadata

    def stat(self, name):
        """
        Describe a file or directory.

        Args:
            name (str): Path to describe

        Returns:
            FileInfo: Metadata of the path

        Raises:
            NotExistError: If nothing exists at or under the path
            PermissionDeniedError: If the backend denied access
        """
        trace_op("stat", name)
        name = self.sanitize(name)
        if is_root(name):
            return FileInfo(name="/", is_dir=True)

        key = self.key(name)
        try:
            metadata = self.client.head_object(self.bucket, key)
        except ObjectNotFoundError:
            return self._stat_directory(name)
        except AccessDeniedError as e:
            raise PermissionDeniedError("stat", name, e) from e

        base = posixpath.basename(name.rstrip('/'))
        if name.endswith('/'):
            # asked for a directory and found its marker
            return FileInfo(name=base, is_dir=True, mod_time=metadata.last_modified)
        return FileInfo(
            name=base,
            size=metadata.content_length,
            mod_time=metadata.last_modified,
        )

    def _stat_directory(self, name):
        prefix = self.key(name).rstrip('/') + '/'
        with _path_context("stat", name):
            page = self.client.list_objects(self.bucket, prefix=prefix, max_keys=1)
        if not page.contents and not page.common_prefixes:
            raise NotExistError("stat", name, ObjectNotFoundError(operation="HEAD"))
        return FileInfo(name=posixpath.basename(name.rstrip('/')), is_dir=True, mod_time=EPOCH)

    def chmod(self, name, mode):
        """
        Map the "other" permission bits of ``mode`` onto a canned ACL.

        other read+write gives public-read-write, other read gives
        public-read, anything else private. All other bits are ignored.
        """
        trace_op("chmod", name, mode=oct(mode))
        name = self.sanitize(name)
        other_read = mode & 0o004 != 0
        other_write = mode & 0o002 != 0
        if other_read and other_write:
            acl = "public-read-write"
        elif other_read:
            acl = "public-read"
        else:
            acl = "private"
        with _path_context("chmod", name):
            self.client.put_object_acl(self.bucket, self.key(name), acl)

    def chown(self, name, uid, gid):
        """Object stores have no owners."""
        raise NotSupportedError("chown is not supported")

    def chtimes(self, name, atime, mtime):
        """Modification times are set by the backend only."""
        raise NotSupportedError("chtimes is not supported")

    # Removing

    def remove(self, name):
        """
        Remove a file, or a directory's marker.

        Raises:
            NotExistError: If the path does not exist
        """
        trace_op("remove", name)
        name = self.sanitize(name)
        info = self.stat(name)
        with _path_context("remove", name):
            if info.is_dir:
                self._force_remove(name.rstrip('/') + '/')
            else:
                self._force_remove(name)

    def _force_remove(self, name):
        # S3 deletes are idempotent, a missing key is not an error
        self.client.delete_object(self.bucket, self.key(name))

    def remove_all(self, name):
        """
        Remove a path and everything under it.

        Not atomic: the first failure stops the walk and is raised, and
        whatever was deleted before it stays deleted.
        """
        trace_op("remove_all", name)
        start_time = time.time()
        name = self.sanitize(name)
        try:
            info = self.stat(name)
        except NotExistError:
            return
        if info.is_dir:
            self._remove_dir(name)
        else:
            self._force_remove(name)
        time_function("remove_all", start_time)

    def _remove_dir(self, name):
        for info in FileHandle(self, name).readdir(0):
            child = posixpath.join(name, info.name)
            if info.is_dir:
                self._remove_dir(child)
            else:
                self._force_remove(child)
        if is_root(name):
            return
        # finally remove the marker representing the directory
        try:
            self._force_remove(name.rstrip('/') + '/')
        except ObjectNotFoundError:
            pass

    # Renaming

    def rename(self, old_name, new_name):
        """
        Rename a file or directory.

        There is no rename on an object store: a file is copied to its new
        key and the original deleted; a directory is renamed child by child,
        then its marker moved. If the delete fails after a successful copy
        both names exist.
        """
        trace_op("rename", new_name, old=old_name)
        start_time = time.time()
        old_name = self.sanitize(old_name)
        new_name = self.sanitize(new_name)
        if old_name == new_name:
            return

        try:
            info = self.stat(old_name)
        except PathError as e:
            raise type(e)("rename", old_name, e.cause) from e

        if info.is_dir:
            self._rename_dir(old_name, new_name)
        else:
            self._move_object(old_name, new_name)
        time_function("rename", start_time)

    def _rename_dir(self, old_name, new_name):
        old_dir = old_name.rstrip('/')
        new_dir = new_name.rstrip('/')
        for info in FileHandle(self, old_dir).readdir(0):
            old_child = posixpath.join(old_dir, info.name)
            new_child = posixpath.join(new_dir, info.name)
            if info.is_dir:
                self._rename_dir(old_child, new_child)
            else:
                self._move_object(old_child, new_child)

        marker = old_dir + '/'
        try:
            self.client.head_object(self.bucket, self.key(marker))
        except ObjectNotFoundError:
            return
        self._move_object(marker, new_dir + '/')

    def _move_object(self, old_name, new_name):
        logger.debug(f"rename: moving {old_name} to {new_name}")
        with _path_context("rename", old_name):
            self.client.copy_object(self.bucket, self.key(old_name), self.key(new_name))
            self.client.delete_object(self.bucket, self.key(old_name))
