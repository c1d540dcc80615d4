"""IPv4 socket addresses and name resolution."""

from __future__ import annotations

import socket
from typing import Any

_AI_ALL = getattr(socket, "AI_ALL", 0)
_NUMERIC_LOOKUP = socket.AI_NUMERICHOST | socket.AI_NUMERICSERV
_NUMERIC_NAMEINFO = socket.NI_NUMERICHOST | socket.NI_NUMERICSERV
_EAI_FAMILY = getattr(socket, "EAI_FAMILY", -6)

from .util import TaggedError


def _lookup(node: str, service: str, flags: int) -> tuple[int, Any]:
    """Resolve ``node``/``service`` to the first IPv4 (family, sockaddr) found."""
    try:
        results = socket.getaddrinfo(node, service, socket.AF_INET, 0, 0, flags)
    except socket.gaierror as exc:
        raise TaggedError(f"getaddrinfo({node}, {service})", exc.errno or 0, exc.strerror or str(exc)) from exc
    if not results:
        raise RuntimeError("getaddrinfo returned successfully but with no results")
    family, _type, _proto, _canonname, sockaddr = results[0]
    return int(family), sockaddr


class Address:
    """An immutable socket address, normally IPv4 with a port."""

    __slots__ = ("_family", "_sockaddr")

    def __init__(self, ip: str, port: int = 0) -> None:
        """Build from a dotted-quad string and a numeric port; nothing is resolved."""
        if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 0xFFFF:
            raise ValueError(f"port must be an integer in 0..65535, not {port!r}")
        self._family, self._sockaddr = _lookup(ip, str(port), _NUMERIC_LOOKUP)

    @classmethod
    def _make(cls, family: int, sockaddr: Any) -> "Address":
        address = cls.__new__(cls)
        address._family = int(family)
        address._sockaddr = tuple(sockaddr) if isinstance(sockaddr, list) else sockaddr
        return address

    @classmethod
    def resolve(cls, hostname: str, service: str) -> "Address":
        """Look up a host name and a service name (e.g. "http") or number."""
        family, sockaddr = _lookup(hostname, str(service), _AI_ALL)
        return cls._make(family, sockaddr)

    @classmethod
    def from_sockaddr(cls, family: int, sockaddr: Any) -> "Address":
        """Wrap an address as returned by the socket module for ``family``."""
        return cls._make(family, sockaddr)

    @classmethod
    def from_ipv4_numeric(cls, ip_address: int) -> "Address":
        """An IPv4 address (port 0) from its 32-bit host-order value."""
        if not 0 <= ip_address <= 0xFFFFFFFF:
            raise ValueError(f"not a 32-bit IPv4 address: {ip_address!r}")
        return cls._make(socket.AF_INET, (socket.inet_ntoa(ip_address.to_bytes(4, "big")), 0))

    @property
    def family(self) -> int:
        return self._family

    def ip_port(self) -> tuple[str, int]:
        """The numeric IP address string and the port."""
        if self._family not in (socket.AF_INET, socket.AF_INET6):
            raise TaggedError("getnameinfo", _EAI_FAMILY, "ai_family not supported")
        try:
            host, port = socket.getnameinfo(self._sockaddr, _NUMERIC_NAMEINFO)
        except socket.gaierror as exc:
            raise TaggedError("getnameinfo", exc.errno or 0, exc.strerror or str(exc)) from exc
        return host, int(port)

    def ip(self) -> str:
        return self.ip_port()[0]

    def port(self) -> int:
        return self.ip_port()[1]

    def ipv4_numeric(self) -> int:
        """The IPv4 address as a 32-bit integer in host order."""
        if self._family != socket.AF_INET:
            raise RuntimeError("ipv4_numeric called on non-IPV4 address")
        return int.from_bytes(socket.inet_aton(self._sockaddr[0]), "big")

    def sockaddr(self) -> Any:
        """The address in the form the socket module expects."""
        return self._sockaddr

    def to_string(self) -> str:
        """Human-readable form, e.g. "8.8.8.8:53"."""
        ip, port = self.ip_port()
        return f"{ip}:{port}"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Address(family={self._family}, sockaddr={self._sockaddr!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Address):
            return NotImplemented
        return self._family == other._family and self._sockaddr == other._sockaddr

    def __hash__(self) -> int:
        return hash((self._family, self._sockaddr))