"""File descriptors for Linux TUN and TAP devices."""

from __future__ import annotations

import fcntl
import os
import struct

from .file_descriptor import FileDescriptor
from .util import system_call

CLONEDEV = "/dev/net/tun"

TUNSETIFF = 0x400454CA
IFF_TUN = 0x0001
IFF_TAP = 0x0002
IFF_NO_PI = 0x1000
IFNAMSIZ = 16


def _make_ifreq(devname: str, is_tun: bool) -> bytes:
    """A ``struct ifreq`` naming the device, with TUN/TAP and no-packet-info flags."""
    name = devname.encode().split(b"\0", 1)[0][: IFNAMSIZ - 1]
    flags = (IFF_TUN if is_tun else IFF_TAP) | IFF_NO_PI
    return struct.pack(f"{IFNAMSIZ}sH22x", name, flags)


class TunTapFD(FileDescriptor):
    """A descriptor attached to an existing persistent TUN or TAP device."""

    def __init__(self, devname: str, is_tun: bool) -> None:
        super().__init__(system_call("open", os.open, CLONEDEV, os.O_RDWR))
        try:
            system_call("ioctl", fcntl.ioctl, self.fd_num(), TUNSETIFF, _make_ifreq(devname, is_tun))
        except BaseException:
            self.close()
            raise


class TunFD(TunTapFD):
    """A TUN device descriptor (carries IP datagrams)."""

    def __init__(self, devname: str) -> None:
        super().__init__(devname, True)


class TapFD(TunTapFD):
    """A TAP device descriptor (carries Ethernet frames)."""

    def __init__(self, devname: str) -> None:
        super().__init__(devname, False)