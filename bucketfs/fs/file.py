# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
File handles for bucketfs.

A FileHandle is bound to one name of an S3Fs and owns at most one stream:

* reading: ranged GETs opened lazily at the logical offset, so seeking only
  moves a number and never touches the network;
* writing: an UploadPipe drained by a background thread into a streaming
  multipart upload, finished (and its outcome reported) by ``close``;
* directories: no byte stream, only ``readdir``/``readdirnames``.
"""

import enum
import os
import threading
import time
from concurrent.futures import Future

from bucketfs.client.exceptions import ObjectError
from .errors import AlreadyOpenedError, FileClosedError, InvalidSeekError, NotSupportedError
from .lister import DirectoryLister
from .pipe import UploadPipe
from .utils import logger, time_function, trace_op

READ_ALL_CHUNK = 1024 * 1024

class HandleState(enum.Enum):
    UNOPENED = "unopened"
    READING = "reading"
    WRITING = "writing"
    CLOSED = "closed"

class FileHandle:
    """
    An open file (or directory) of an S3Fs.

    Handles are not safe for concurrent use by several threads.
    """

    def __init__(self, fs, name):
        """
        Args:
            fs (S3Fs): Filesystem the handle belongs to
            name (str): Normalized name of the file
        """
        self._fs = fs
        self._name = name
        self._state = HandleState.UNOPENED
        self._cached_info = None
        self._lister = None

        # read side
        self._offset = 0
        self._stream = None
        self._stream_end = -1  # last byte covered by the open range

        # write side
        self._pipe = None
        self._upload_thread = None
        self._upload_future = None
        self._upload_error = None
        self._written = 0

    def __repr__(self):
        return f"<FileHandle {self._name!r} {self._state.value}>"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def name(self):
        """Name of the file, i.e. the S3 path without the bucket name."""
        return self._name

    @property
    def state(self):
        return self._state

    @property
    def closed(self):
        return self._state is HandleState.CLOSED

    def _check_open(self):
        if self._state is HandleState.CLOSED:
            raise FileClosedError()

    # Opening

    def _open_read(self, info):
        """Bind the handle to already fetched metadata; called by S3Fs.open_file."""
        self._cached_info = info
        if not info.is_dir:
            self._state = HandleState.READING

    def open_write_stream(self):
        """
        Prepare the handle for writing.

        The upload itself starts with the first ``write`` (or at ``close`` if
        nothing was written, which stores an empty object).

        Raises:
            AlreadyOpenedError: If the handle already has a stream
            FileClosedError: If the handle is closed
        """
        self._check_open()
        if self._pipe is not None or self._stream is not None or self._state is HandleState.READING:
            raise AlreadyOpenedError()
        self._pipe = UploadPipe()
        self._upload_future = Future()
        self._state = HandleState.WRITING

    # Metadata

    def stat(self):
        """
        Fetch fresh metadata for the file and cache it.

        Returns:
            FileInfo: Metadata of the file
        """
        info = self._fs.stat(self._name)
        self._cached_info = info
        return info

    def _size(self):
        if self._cached_info is None:
            self.stat()
        return self._cached_info.size

    def sync(self):
        """Nothing to flush before close; uploads only complete there."""
        return None

    def truncate(self, size=None):
        raise NotSupportedError("truncate is not supported")

    # Reading

    def read(self, size=-1):
        """
        Read up to ``size`` bytes from the current offset.

        Args:
            size (int): Maximum number of bytes, negative to read to the end

        Returns:
            bytes: Data read; ``b""`` only at end of file

        Raises:
            NotSupportedError: If the handle is open for writing
            FileClosedError: If the handle is closed
        """
        self._check_open()
        if self._pipe is not None:
            raise NotSupportedError("file is open for writing")
        if size is None or size < 0:
            return self._read_all()
        if size == 0:
            return b""

        total = self._size()
        if self._offset >= total:
            self._close_read_stream()
            return b""

        data = b""
        for _ in range(2):
            if self._stream is None:
                self._open_range(size, total)
            data = self._stream.read(size)
            if data:
                break
            # the range ran dry before its end: drop it and retry once
            self._close_read_stream()
        else:
            raise ObjectError(
                f"{self._name} ended at {self._offset} bytes, expected {total}",
                operation="GET",
            )

        self._offset += len(data)
        if self._offset > self._stream_end or self._offset >= total:
            self._close_read_stream()
        trace_op("read", self._name, size=size, got=len(data), offset=self._offset)
        return data

    def _read_all(self):
        chunks = []
        while True:
            data = self.read(READ_ALL_CHUNK)
            if not data:
                return b"".join(chunks)
            chunks.append(data)

    def _open_range(self, size, total):
        end = min(self._offset + size - 1, total - 1)
        key = self._fs.key(self._name)
        logger.debug(f"read: opening range {self._offset}-{end} of {key}")
        self._stream = self._fs.client.get_object(self._fs.bucket, key, (self._offset, end))
        self._stream_end = end
        self._state = HandleState.READING

    def _close_read_stream(self):
        if self._stream is not None:
            try:
                self._stream.close()
            finally:
                self._stream = None
                self._stream_end = -1

    def read_at(self, size, offset):
        """Seek to ``offset`` then read up to ``size`` bytes."""
        self.seek(offset, os.SEEK_SET)
        return self.read(size)

    def seek(self, offset, whence=os.SEEK_SET):
        """
        Move the logical read offset. No stream is opened here.

        With ``os.SEEK_END`` the offset is subtracted from the file size,
        so ``seek(3, os.SEEK_END)`` positions three bytes before the end.

        Args:
            offset (int): Offset, interpreted according to ``whence``
            whence (int): os.SEEK_SET, os.SEEK_CUR or os.SEEK_END

        Returns:
            int: The new offset

        Raises:
            InvalidSeekError: If the resulting offset is negative
            NotSupportedError: If the handle is open for writing
            FileClosedError: If the handle is closed
        """
        self._check_open()
        if self._pipe is not None:
            raise NotSupportedError("seek is not supported on a file open for writing")

        if whence == os.SEEK_SET:
            new_offset = offset
        elif whence == os.SEEK_CUR:
            new_offset = self._offset + offset
        elif whence == os.SEEK_END:
            new_offset = self._size() - offset
        else:
            raise ValueError(f"invalid whence ({whence})")

        if new_offset < 0:
            raise InvalidSeekError(new_offset)
        if new_offset != self._offset:
            self._close_read_stream()
        self._offset = new_offset
        return new_offset

    def tell(self):
        """Current read offset, or the number of bytes written so far."""
        if self._pipe is not None:
            return self._written
        return self._offset

    # Writing

    def write(self, data):
        """
        Append data to the file.

        Data is handed to the upload thread; a ``write`` returning normally
        does not mean the data reached the backend, only ``close`` tells.

        Args:
            data (bytes): Data to append

        Returns:
            int: Number of bytes written

        Raises:
            NotSupportedError: If the handle is not open for writing
            FileClosedError: If the handle is closed
            BucketFSError: The upload failure, once the upload has failed
        """
        self._check_open()
        if self._pipe is None:
            raise NotSupportedError("file is not open for writing")
        if self._upload_thread is None:
            self._start_upload()
        try:
            written = self._pipe.write(data)
        except BrokenPipeError:
            # the pipe only breaks when the upload failed; report why
            if self._upload_error is not None:
                raise self._upload_error
            raise
        self._written += written
        return written

    def write_at(self, data, offset):
        """Seek to ``offset`` then write; fails on every kind of handle."""
        self.seek(offset, os.SEEK_SET)
        return self.write(data)

    def _start_upload(self):
        key = self._fs.key(self._name)
        self._upload_thread = threading.Thread(
            target=self._upload, args=(key,), name=f"bucketfs-upload:{key}", daemon=True
        )
        self._upload_thread.start()

    def _upload(self, key):
        start_time = time.time()
        try:
            self._fs.client.upload_stream(
                self._fs.bucket, key, self._pipe, concurrency=1, props=self._fs.file_props
            )
        except Exception as e:
            logger.error(f"upload of {key} failed: {e}")
            self._upload_error = e
            self._pipe.close_reader()
            self._upload_future.set_exception(e)
            return
        time_function(f"upload of {key}", start_time)
        self._upload_future.set_result(None)

    # Directories

    def _get_lister(self):
        self._check_open()
        if self._lister is None:
            self._lister = DirectoryLister(self._fs, self._name)
        return self._lister

    def readdir(self, n=0):
        """
        Read directory entries; see DirectoryLister.readdir.

        Raises:
            EOFError: At the end of the directory
        """
        return self._get_lister().readdir(n)

    def readdirnames(self, n=0):
        """Read directory entry names; see DirectoryLister.readdirnames."""
        return self._get_lister().readdirnames(n)

    # Closing

    def close(self):
        """
        Close the handle.

        For a write handle this signals end of data and waits for the upload
        to finish; it raises the upload's error if it failed. Closing twice is
        a no-op.
        """
        if self._state is HandleState.CLOSED:
            return
        self._state = HandleState.CLOSED
        self._close_read_stream()

        if self._pipe is None:
            return
        if self._upload_thread is None:
            self._start_upload()
        self._pipe.close_writer()
        logger.debug(f"close: waiting for upload of {self._name} ({self._written} bytes written)")
        try:
            self._upload_future.result()
        finally:
            self._upload_thread = None
