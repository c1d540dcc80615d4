"""Shared helpers: error types, system-call checking, timing, checksums and hexdumps."""

from __future__ import annotations

import os
import random
import sys
import time
from typing import Any, Callable, Optional

_MT19937_STATE_WORDS = 624
_U32_MASK = 0xFFFFFFFF


class TaggedError(RuntimeError):
    """An error code plus a description of what was being attempted."""

    def __init__(self, attempt: str, error_code: int, message: str) -> None:
        super().__init__(f"{attempt}: {message}")
        self.attempt = attempt
        self.error_code = error_code
        self.message = message


class UnixError(TaggedError):
    """A failed system call, described by its name and errno."""

    def __init__(self, attempt: str, error_code: int) -> None:
        super().__init__(attempt, error_code, os.strerror(error_code))


def system_call(attempt: str, func: Callable[..., Any], *args: Any, errno_mask: int = 0) -> Any:
    """Call ``func(*args)``, turning an OSError into a UnixError.

    An error whose errno equals ``errno_mask`` is tolerated and yields None.
    """
    try:
        return func(*args)
    except OSError as exc:
        code = exc.errno if exc.errno is not None else 0
        if code == errno_mask:
            return None
        raise UnixError(attempt, code) from exc


def get_random_generator() -> random.Random:
    """Return a Mersenne Twister generator seeded with a full state of OS entropy."""
    seed = int.from_bytes(os.urandom(4 * _MT19937_STATE_WORDS), "little")
    return random.Random(seed)


_program_start: Optional[int] = None


def timestamp_ms() -> int:
    """Milliseconds elapsed since the first call to this function."""
    global _program_start
    now = time.monotonic_ns()
    if _program_start is None:
        _program_start = now
    return (now - _program_start) // 1_000_000


class InternetChecksum:
    """The Internet (ones' complement) checksum, usable incrementally."""

    def __init__(self, initial_sum: int = 0) -> None:
        self._sum = initial_sum & _U32_MASK
        self._parity = False

    def add(self, data: bytes | bytearray | memoryview) -> None:
        """Feed more bytes; byte pairing carries over between calls."""
        for byte in memoryview(data).cast("B"):
            self._sum = (self._sum + (byte if self._parity else byte << 8)) & _U32_MASK
            self._parity = not self._parity

    def value(self) -> int:
        """The checksum of everything added so far, as a 16-bit integer."""
        folded = self._sum
        while folded > 0xFFFF:
            folded = (folded >> 16) + (folded & 0xFFFF)
        return ~folded & 0xFFFF


def _format_hexdump(data: bytes, indent: int) -> str:
    pad = " " * indent
    parts: list[str] = []
    chars = ""
    for printed, byte in enumerate(data):
        if printed & 0xF == 0:
            if printed:
                parts.append("    " + chars + "\n")
                chars = ""
            parts.append(f"{pad}{printed:08x}:    ")
        elif printed & 1 == 0:
            parts.append(" ")
        parts.append(f"{byte:02x}")
        chars += chr(byte) if 0x20 <= byte < 0x7F else "."
    remainder = (16 - len(data) % 16) % 16
    parts.append(" " * (2 * remainder + remainder // 2 + 4) + (chars or " "))
    parts.append("\n\n")
    return "".join(parts)


def hexdump(data: bytes | bytearray | memoryview, indent: int = 0) -> None:
    """Print a hex and ASCII dump of ``data`` to standard output."""
    sys.stdout.write(_format_hexdump(bytes(data), indent))
    sys.stdout.flush()