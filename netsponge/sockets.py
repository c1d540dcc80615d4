"""Network sockets built on reference-counted file descriptors."""

from __future__ import annotations

import socket
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from .address import Address
from .buffer import Buffer, BufferList, BufferViewList, BytesLike
from .file_descriptor import FileDescriptor
from .util import system_call

_MSG_TRUNC = getattr(socket, "MSG_TRUNC", 0)

Payload = Union[BufferViewList, BufferList, Buffer, BytesLike]


def _open_socket(domain: int, type_: int) -> int:
    return socket.socket(domain, type_).detach()


def _as_views(payload: Payload) -> BufferViewList:
    return payload if isinstance(payload, BufferViewList) else BufferViewList(payload)


class Socket(FileDescriptor):
    """A network socket; normally used through a subclass."""

    def __init__(self, domain: int, type: int, fd: Union[FileDescriptor, int, None] = None) -> None:
        if fd is None:
            super().__init__(system_call("socket", _open_socket, domain, type))
            return
        if isinstance(fd, FileDescriptor):
            self._internal_fd = fd.duplicate()._internal_fd
        else:
            super().__init__(fd)
        with self._as_socket("getsockopt") as sock:
            if sock.family != domain:
                raise RuntimeError("socket domain mismatch")
            if sock.type != type:
                raise RuntimeError("socket type mismatch")

    @contextmanager
    def _as_socket(self, attempt: str) -> Iterator[socket.socket]:
        """A temporary socket object over this descriptor that never closes it."""
        sock = system_call(attempt, lambda: socket.socket(fileno=self.fd_num()))
        try:
            yield sock
        finally:
            sock.detach()

    def _get_address(self, name_of_function: str) -> Address:
        with self._as_socket(name_of_function) as sock:
            method = sock.getsockname if name_of_function == "getsockname" else sock.getpeername
            sockaddr = system_call(name_of_function, method)
            return Address.from_sockaddr(sock.family, sockaddr)

    def _setsockopt(self, level: int, option: int, value: Union[int, bytes]) -> None:
        with self._as_socket("setsockopt") as sock:
            system_call("setsockopt", sock.setsockopt, level, option, value)

    def bind(self, address: Address) -> None:
        """Bind to a local address, usually before listen/accept."""
        with self._as_socket("bind") as sock:
            system_call("bind", sock.bind, address.sockaddr())

    def connect(self, address: Address) -> None:
        """Connect to a peer address."""
        with self._as_socket("connect") as sock:
            system_call("connect", sock.connect, address.sockaddr())

    def shutdown(self, how: int) -> None:
        """Shut down reading (SHUT_RD), writing (SHUT_WR) or both (SHUT_RDWR)."""
        with self._as_socket("shutdown") as sock:
            system_call("shutdown", sock.shutdown, how)
        if how == socket.SHUT_RD:
            self.register_read()
        elif how == socket.SHUT_WR:
            self.register_write()
        elif how == socket.SHUT_RDWR:
            self.register_read()
            self.register_write()
        else:
            raise RuntimeError("Socket.shutdown() called with invalid `how`")

    def local_address(self) -> Address:
        return self._get_address("getsockname")

    def peer_address(self) -> Address:
        return self._get_address("getpeername")

    def set_reuseaddr(self) -> None:
        """Allow the local address to be reused sooner (at some cost in robustness)."""
        self._setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)


@dataclass(frozen=True)
class ReceivedDatagram:
    """A received datagram and the address it came from."""

    source_address: Address
    payload: bytes


class UDPSocket(Socket):
    """An IPv4 UDP socket."""

    def __init__(self, fd: Union[FileDescriptor, int, None] = None) -> None:
        super().__init__(socket.AF_INET, socket.SOCK_DGRAM, fd)

    def recv(self, mtu: int = 65536) -> ReceivedDatagram:
        """Receive one datagram; raises RuntimeError if it is longer than ``mtu``."""
        buf = bytearray(mtu)
        with self._as_socket("recvfrom") as sock:
            length, source = system_call("recvfrom", sock.recvfrom_into, buf, mtu, _MSG_TRUNC)
            family = sock.family
        if length > mtu:
            raise RuntimeError("recvfrom (oversized datagram)")
        self.register_read()
        return ReceivedDatagram(Address.from_sockaddr(family, source), bytes(buf[:length]))

    def _sendmsg(self, payload: Payload, destination: Optional[Address]) -> None:
        views = _as_views(payload)
        with self._as_socket("sendmsg") as sock:
            if destination is None:
                sent = system_call("sendmsg", sock.sendmsg, views.as_iovecs())
            else:
                sent = system_call("sendmsg", sock.sendmsg, views.as_iovecs(), (), 0, destination.sockaddr())
        if sent != views.size():
            raise RuntimeError("datagram payload too big for sendmsg()")
        self.register_write()

    def sendto(self, destination: Address, payload: Payload) -> None:
        """Send a datagram to ``destination``."""
        self._sendmsg(payload, destination)

    def send(self, payload: Payload) -> None:
        """Send a datagram to the connected peer."""
        self._sendmsg(payload, None)


class TCPSocket(Socket):
    """An IPv4 TCP socket."""

    def __init__(self, fd: Union[FileDescriptor, int, None] = None) -> None:
        super().__init__(socket.AF_INET, socket.SOCK_STREAM, fd)

    def listen(self, backlog: int = 16) -> None:
        """Start accepting incoming connections."""
        with self._as_socket("listen") as sock:
            system_call("listen", sock.listen, backlog)

    def accept(self) -> "TCPSocket":
        """Wait for and return a new connection."""
        self.register_read()
        with self._as_socket("accept") as sock:
            conn, _peer = system_call("accept", sock.accept)
        return TCPSocket(FileDescriptor(conn.detach()))


class LocalStreamSocket(Socket):
    """A Unix-domain stream socket wrapped around an existing descriptor."""

    def __init__(self, fd: Union[FileDescriptor, int]) -> None:
        super().__init__(socket.AF_UNIX, socket.SOCK_STREAM, fd)