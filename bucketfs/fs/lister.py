# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Directory listing for bucketfs.

Directories do not exist on the object store; listing one means a delimited
LIST on the directory's key prefix. Common prefixes are the subdirectories,
contents are the files. The lister keeps the continuation token between
calls so a directory can be read a page at a time.
"""
import posixpath
import time

from .fileinfo import FileInfo
from .utils import logger, time_function

class DirectoryLister:
    """
    Restartable, page-at-a-time enumeration of a directory.

    Once the backend reports the listing is complete, the lister is exhausted
    and every later call raises EOFError; a new lister is needed to list again.

    Attributes:
        name (str): Normalized name of the directory being listed
    """

    PAGE_SIZE = 100

    def __init__(self, fs, name):
        """
        Args:
            fs (S3Fs): Filesystem the directory belongs to
            name (str): Normalized directory name
        """
        self._fs = fs
        self.name = name
        self._continuation_token = None
        self._exhausted = False

    @property
    def exhausted(self):
        return self._exhausted

    def _prefix(self):
        # The bucket root lists with an empty prefix, everything else needs
        # a trailing slash so "dir1" does not match "dir10/..."
        prefix = self._fs.key(self.name)
        if prefix and not prefix.endswith('/'):
            prefix += '/'
        return prefix

    def readdir(self, n=0):
        """
        Read the next entries of the directory.

        Args:
            n (int): Maximum number of entries; ``n <= 0`` reads all remaining entries

        Returns:
            list[FileInfo]: Subdirectories first, then files, in backend order

        Raises:
            EOFError: If the previous call reached the end of the listing
        """
        if self._exhausted:
            raise EOFError(f"end of directory {self.name}")
        if n <= 0:
            return self._readdir_all()

        start_time = time.time()
        prefix = self._prefix()
        page = self._fs.client.list_objects(
            self._fs.bucket,
            prefix=prefix,
            delimiter='/',
            continuation_token=self._continuation_token,
            max_keys=n,
        )
        self._continuation_token = page.next_token
        if not page.is_truncated:
            self._exhausted = True

        infos = []
        for sub_prefix in page.common_prefixes:
            name = posixpath.basename(sub_prefix.rstrip('/'))
            if name:
                infos.append(FileInfo(name=name, is_dir=True))
        for obj in page.contents:
            if obj.key == prefix:
                # the directory's own marker
                continue
            infos.append(FileInfo(
                name=posixpath.basename(obj.key),
                size=obj.size,
                mod_time=obj.last_modified,
            ))
        logger.debug(f"readdir: {len(infos)} entries under '{prefix}' (exhausted={self._exhausted})")
        time_function("readdir page", start_time)
        return infos

    def _readdir_all(self):
        infos = []
        while True:
            try:
                infos.extend(self.readdir(self.PAGE_SIZE))
            except EOFError:
                return infos

    def readdirnames(self, n=0):
        """Like readdir, but returns base names only."""
        return [posixpath.basename(info.name) for info in self.readdir(n)]
