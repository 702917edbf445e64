# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Bounded in-process pipe feeding streaming uploads.

A FileHandle writes into the pipe from the caller's thread while the upload
thread reads from it. The buffer is bounded: once ``capacity`` bytes are
queued, ``write`` blocks until the uploader drains some of them, which keeps
memory use flat however large the file is.
"""

import threading

from .utils import logger

DEFAULT_PIPE_CAPACITY = 5 * 1024 * 1024  # one multipart part

class UploadPipe:
    """
    Single-producer, single-consumer byte pipe with back-pressure.

    Attributes:
        capacity (int): Maximum number of bytes buffered before writes block
    """

    def __init__(self, capacity=DEFAULT_PIPE_CAPACITY):
        if capacity <= 0:
            raise ValueError("pipe capacity must be positive")
        self.capacity = capacity
        self._buffer = bytearray()
        self._cond = threading.Condition()
        self._writer_closed = False
        self._reader_closed = False

    # Writer side

    def write(self, data):
        """
        Append data to the pipe, blocking while it is full.

        Args:
            data (bytes): Data to append

        Returns:
            int: Number of bytes written (always ``len(data)``)

        Raises:
            BrokenPipeError: If the reader side has been closed
            ValueError: If the writer side has been closed
        """
        view = memoryview(data)
        written = 0
        with self._cond:
            while written < len(view):
                while not self._reader_closed and len(self._buffer) >= self.capacity:
                    self._cond.wait()
                if self._reader_closed:
                    raise BrokenPipeError("write on closed pipe")
                if self._writer_closed:
                    raise ValueError("write to a pipe whose writer is closed")
                room = self.capacity - len(self._buffer)
                chunk = view[written:written + room]
                self._buffer.extend(chunk)
                written += len(chunk)
                self._cond.notify_all()
        return written

    def close_writer(self):
        """Signal end of data to the reader."""
        with self._cond:
            self._writer_closed = True
            self._cond.notify_all()

    # Reader side

    def readable(self):
        return True

    def seekable(self):
        return False

    def read(self, size=-1):
        """
        Read up to ``size`` bytes.

        Blocks until ``size`` bytes are buffered, the buffer is full or the
        writer has closed. A short result therefore only happens at end of
        data or when ``size`` exceeds the capacity.

        Args:
            size (int): Number of bytes wanted, negative for everything

        Returns:
            bytes: The data read, ``b""`` at end of data
        """
        with self._cond:
            if size is None or size < 0:
                chunks = []
                while True:
                    while not self._writer_closed and len(self._buffer) < self.capacity:
                        self._cond.wait()
                    chunks.append(bytes(self._buffer))
                    self._buffer.clear()
                    self._cond.notify_all()
                    if self._writer_closed:
                        return b"".join(chunks)
            while (not self._writer_closed and len(self._buffer) < size
                   and len(self._buffer) < self.capacity):
                self._cond.wait()
            data = bytes(self._buffer[:size])
            del self._buffer[:size]
            self._cond.notify_all()
            return data

    def close_reader(self):
        """Stop consuming; pending and future writes fail with BrokenPipeError."""
        with self._cond:
            if not self._reader_closed:
                logger.debug(f"UploadPipe: reader closed with {len(self._buffer)} bytes pending")
            self._reader_closed = True
            self._buffer.clear()
            self._cond.notify_all()
