"""Shared byte buffers that can discard bytes from the front without copying."""

from __future__ import annotations

import copy
from collections import deque
from typing import Iterable, Optional, Union

BytesLike = Union[bytes, bytearray, memoryview]
_BYTES_TYPES = (bytes, bytearray, memoryview)


class Buffer:
    """A shared read-only byte string that can discard bytes from the front."""

    __slots__ = ("_storage", "_offset")

    def __init__(self, data: Optional[BytesLike] = None) -> None:
        if data is not None and not isinstance(data, _BYTES_TYPES):
            raise TypeError(f"Buffer needs bytes-like data, not {type(data).__name__}")
        self._storage: Optional[bytes] = None if data is None else bytes(data)
        self._offset = 0

    def __copy__(self) -> "Buffer":
        clone = Buffer()
        clone._storage = self._storage
        clone._offset = self._offset
        return clone

    def str(self) -> memoryview:
        """A read-only view of the remaining bytes."""
        if self._storage is None:
            return memoryview(b"")
        return memoryview(self._storage)[self._offset :]

    def __bytes__(self) -> bytes:
        return self.copy()

    def at(self, n: int) -> int:
        """The byte at position ``n``."""
        view = self.str()
        if not 0 <= n < len(view):
            raise IndexError("Buffer.at")
        return view[n]

    def size(self) -> int:
        return len(self.str())

    def __len__(self) -> int:
        return self.size()

    def copy(self) -> bytes:
        """A new bytes object holding the remaining contents."""
        return bytes(self.str())

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes; storage is dropped once all are gone."""
        if n < 0 or n > self.size():
            raise IndexError("Buffer.remove_prefix")
        self._offset += n
        if self._storage is not None and self._offset == len(self._storage):
            self._storage = None
            self._offset = 0

    def __repr__(self) -> str:
        return f"Buffer({self.copy()!r})"


class BufferList:
    """A discontiguous byte string made of shared Buffers."""

    def __init__(self, data: Union[Buffer, BytesLike, None] = None) -> None:
        self._buffers: deque[Buffer] = deque()
        if isinstance(data, Buffer):
            self._buffers.append(copy.copy(data))
        elif data is not None:
            self._buffers.append(Buffer(data))

    def buffers(self) -> tuple[Buffer, ...]:
        """The underlying Buffers, as independent copies."""
        return tuple(copy.copy(buf) for buf in self._buffers)

    def append(self, other: Union["BufferList", Buffer, BytesLike]) -> None:
        """Append another list's buffers (sharing their storage)."""
        if not isinstance(other, BufferList):
            other = BufferList(other)
        self._buffers.extend(copy.copy(buf) for buf in other._buffers)

    def to_buffer(self) -> Buffer:
        """Convert to a single Buffer; fails unless at most one Buffer is held."""
        if not self._buffers:
            return Buffer()
        if len(self._buffers) == 1:
            return copy.copy(self._buffers[0])
        raise RuntimeError(
            "BufferList: please use concatenate() to combine a multi-Buffer BufferList into one Buffer"
        )

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes across the held Buffers."""
        while n > 0:
            if not self._buffers:
                raise IndexError("BufferList.remove_prefix")
            front = self._buffers[0]
            if n < front.size():
                front.remove_prefix(n)
                n = 0
            else:
                n -= front.size()
                self._buffers.popleft()

    def size(self) -> int:
        return sum(buf.size() for buf in self._buffers)

    def __len__(self) -> int:
        return self.size()

    def concatenate(self) -> bytes:
        """Copy all contents into one bytes object."""
        return b"".join(buf.str() for buf in self._buffers)


class BufferViewList:
    """A non-owning view over a discontiguous byte string."""

    def __init__(self, data: Union[BufferList, Buffer, BytesLike]) -> None:
        views: Iterable[memoryview]
        if isinstance(data, BufferList):
            views = (buf.str() for buf in data.buffers())
        elif isinstance(data, Buffer):
            views = (data.str(),)
        elif isinstance(data, _BYTES_TYPES):
            views = (memoryview(data),)
        else:
            raise TypeError(f"cannot view {type(data).__name__} as bytes")
        self._views: deque[memoryview] = deque(views)

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes of the view."""
        while n > 0:
            if not self._views:
                raise IndexError("BufferViewList.remove_prefix")
            front = self._views[0]
            if n < len(front):
                self._views[0] = front[n:]
                n = 0
            else:
                n -= len(front)
                self._views.popleft()

    def size(self) -> int:
        return sum(len(view) for view in self._views)

    def __len__(self) -> int:
        return self.size()

    def as_iovecs(self) -> list[memoryview]:
        """The views as a list, suitable for ``os.writev`` or ``socket.sendmsg``."""
        return list(self._views)