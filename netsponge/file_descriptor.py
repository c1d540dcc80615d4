"""Reference-counted handles to kernel file descriptors."""

from __future__ import annotations

import os
import sys
from typing import Optional, Union

from .buffer import Buffer, BufferList, BufferViewList, BytesLike
from .util import system_call

_BUFFER_SIZE = 1024 * 1024  # maximum size of a single read

WritableData = Union[BufferViewList, BufferList, Buffer, BytesLike]


class _FDWrapper:
    """The shared state behind every duplicate of a FileDescriptor."""

    __slots__ = ("fd", "eof", "closed", "read_count", "write_count")

    def __init__(self, fd: int) -> None:
        if fd < 0:
            raise RuntimeError(f"invalid fd number:{fd}")
        self.fd = fd
        self.eof = False
        self.closed = False
        self.read_count = 0
        self.write_count = 0

    def close(self) -> None:
        system_call("close", os.close, self.fd)
        self.eof = self.closed = True

    def __del__(self) -> None:
        if getattr(self, "closed", True):
            return
        try:
            self.close()
        except Exception as exc:  # never raise from a finaliser
            print(f"Exception destructing FDWrapper: {exc}", file=sys.stderr)


def _drop_prefix(views: list[memoryview], n: int) -> list[memoryview]:
    """Return ``views`` without their first ``n`` bytes."""
    remaining = list(views)
    while n > 0:
        if not remaining:
            raise IndexError("BufferViewList.remove_prefix")
        front = remaining[0]
        if n < len(front):
            remaining[0] = front[n:]
            n = 0
        else:
            n -= len(front)
            remaining.pop(0)
    return remaining


class FileDescriptor:
    """A handle to a file descriptor, shared by all of its duplicates.

    The descriptor is closed explicitly with close(), on leaving a ``with``
    block, or once the last duplicate is garbage collected. Reads and writes
    are counted so an event loop can detect busy waiting.
    """

    def __init__(self, fd: int) -> None:
        self._internal_fd = _FDWrapper(fd)

    @classmethod
    def _sharing(cls, wrapper: _FDWrapper) -> "FileDescriptor":
        handle = FileDescriptor.__new__(FileDescriptor)
        handle._internal_fd = wrapper
        return handle

    def read(self, limit: Optional[int] = None) -> bytes:
        """Read up to ``limit`` bytes (at most 1 MiB at a time); fewer may be returned."""
        size_to_read = _BUFFER_SIZE if limit is None else min(_BUFFER_SIZE, limit)
        data = system_call("read", os.read, self.fd_num(), size_to_read)
        if size_to_read > 0 and not data:
            self._internal_fd.eof = True
        if len(data) > size_to_read:
            raise RuntimeError("read() read more than requested")
        self.register_read()
        return data

    def write(self, data: WritableData, write_all: bool = True) -> int:
        """Write ``data``, looping until all of it is written if ``write_all``."""
        views = (data if isinstance(data, BufferViewList) else BufferViewList(data)).as_iovecs()
        total = 0
        while True:
            pending = sum(len(view) for view in views)
            written = system_call("writev", os.writev, self.fd_num(), views)
            if written == 0 and pending != 0:
                raise RuntimeError("write returned 0 given non-empty input buffer")
            if written > pending:
                raise RuntimeError("write wrote more than length of input buffer")
            self.register_write()
            views = _drop_prefix(views, written)
            total += written
            if not (write_all and views and sum(len(view) for view in views)):
                return total

    def close(self) -> None:
        """Close the underlying descriptor for every duplicate."""
        self._internal_fd.close()

    def duplicate(self) -> "FileDescriptor":
        """Another handle sharing this descriptor and its state."""
        return FileDescriptor._sharing(self._internal_fd)

    def set_blocking(self, blocking: bool) -> None:
        """Switch the descriptor between blocking and non-blocking mode."""
        system_call("fcntl", os.set_blocking, self.fd_num(), blocking)

    def register_read(self) -> None:
        self._internal_fd.read_count += 1

    def register_write(self) -> None:
        self._internal_fd.write_count += 1

    def fd_num(self) -> int:
        return self._internal_fd.fd

    def eof(self) -> bool:
        return self._internal_fd.eof

    def closed(self) -> bool:
        return self._internal_fd.closed

    def read_count(self) -> int:
        return self._internal_fd.read_count

    def write_count(self) -> int:
        return self._internal_fd.write_count

    def __enter__(self) -> "FileDescriptor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self.closed():
            self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed() else "open"
        return f"<{type(self).__name__} fd={self.fd_num()} {state}>"