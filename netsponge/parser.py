"""Network-byte-order integer parsing and unparsing."""

from __future__ import annotations

import copy
import enum
from typing import Union

from .buffer import Buffer, BytesLike


class ParseResult(enum.Enum):
    """The result of parsing or unparsing a packet."""

    NO_ERROR = 0
    BAD_CHECKSUM = 1
    PACKET_TOO_SHORT = 2
    WRONG_IP_VERSION = 3
    HEADER_TOO_SHORT = 4
    TRUNCATED_PACKET = 5
    UNSUPPORTED = 6

    def __str__(self) -> str:
        return as_string(self)


_NAMES = {
    ParseResult.NO_ERROR: "NoError",
    ParseResult.BAD_CHECKSUM: "BadChecksum",
    ParseResult.PACKET_TOO_SHORT: "PacketTooShort",
    ParseResult.WRONG_IP_VERSION: "WrongIPVersion",
    ParseResult.HEADER_TOO_SHORT: "HeaderTooShort",
    ParseResult.TRUNCATED_PACKET: "TruncatedPacket",
    ParseResult.UNSUPPORTED: "Unsupported",
}


def as_string(result: ParseResult) -> str:
    """The display name of a ParseResult."""
    return _NAMES[result]


class NetParser:
    """Reads big-endian integers from the front of a Buffer, recording the first error."""

    def __init__(self, buffer: Union[Buffer, BytesLike]) -> None:
        self._buffer = copy.copy(buffer) if isinstance(buffer, Buffer) else Buffer(buffer)
        self._error = ParseResult.NO_ERROR

    def buffer(self) -> Buffer:
        """A copy of the unparsed remainder."""
        return copy.copy(self._buffer)

    def get_error(self) -> ParseResult:
        return self._error

    def set_error(self, result: ParseResult) -> None:
        self._error = result

    def error(self) -> bool:
        """True once any error has been recorded."""
        return self._error is not ParseResult.NO_ERROR

    def _check_size(self, size: int) -> None:
        if size > self._buffer.size():
            self.set_error(ParseResult.PACKET_TOO_SHORT)

    def _parse_int(self, length: int) -> int:
        self._check_size(length)
        if self.error():
            return 0
        value = int.from_bytes(self._buffer.str()[:length], "big")
        self._buffer.remove_prefix(length)
        return value

    def u32(self) -> int:
        return self._parse_int(4)

    def u16(self) -> int:
        return self._parse_int(2)

    def u8(self) -> int:
        return self._parse_int(1)

    def remove_prefix(self, n: int) -> None:
        """Skip ``n`` bytes, or record PACKET_TOO_SHORT."""
        self._check_size(n)
        if self.error():
            return
        self._buffer.remove_prefix(n)


class NetUnparser:
    """Appends big-endian integers to a bytearray, truncating to the field width."""

    @staticmethod
    def _unparse_int(out: bytearray, value: int, length: int) -> None:
        out.extend((value & ((1 << (8 * length)) - 1)).to_bytes(length, "big"))

    @staticmethod
    def u32(out: bytearray, value: int) -> None:
        NetUnparser._unparse_int(out, value, 4)

    @staticmethod
    def u16(out: bytearray, value: int) -> None:
        NetUnparser._unparse_int(out, value, 2)

    @staticmethod
    def u8(out: bytearray, value: int) -> None:
        NetUnparser._unparse_int(out, value, 1)