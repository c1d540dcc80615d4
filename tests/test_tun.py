import errno
import os
import struct
from unittest import mock

import pytest

from netsponge import tun
from netsponge.tun import TapFD, TunFD, TunTapFD
from netsponge.util import UnixError


def _flags(request):
    return struct.unpack_from("H", request, 16)[0]


def test_ifreq_layout_for_tun():
    request = tun._make_ifreq("tun144", True)
    assert len(request) == 40
    assert request[:16] == b"tun144" + bytes(10)
    assert _flags(request) == tun.IFF_TUN | tun.IFF_NO_PI


def test_ifreq_flags_for_tap():
    assert _flags(tun._make_ifreq("tap10", False)) == tun.IFF_TAP | tun.IFF_NO_PI


def test_ifreq_truncates_long_names():
    request = tun._make_ifreq("x" * 20, True)
    assert request[:16] == b"x" * 15 + b"\0"


def _open_null():
    return os.open(os.devnull, os.O_RDWR)


@pytest.mark.parametrize("cls, expected_mode", [(TunFD, "tun"), (TapFD, "tap")])
def test_open_attaches_device(cls, expected_mode):
    fd = _open_null()
    with mock.patch("os.open", return_value=fd) as fake_open, mock.patch("fcntl.ioctl") as fake_ioctl:
        with cls("dev144") as dev:
            assert dev.fd_num() == fd
            fake_open.assert_called_once_with("/dev/net/tun", os.O_RDWR)
            (num, request, arg), _ = fake_ioctl.call_args
            assert num == fd
            assert request == tun.TUNSETIFF
            assert arg[:16] == b"dev144" + bytes(10)
            mode_flag = tun.IFF_TUN if expected_mode == "tun" else tun.IFF_TAP
            assert _flags(arg) == mode_flag | tun.IFF_NO_PI
    assert dev.closed()


def test_missing_clone_device_raises_unix_error():
    with mock.patch("os.open", side_effect=FileNotFoundError(errno.ENOENT, "No such file")):
        with pytest.raises(UnixError) as info:
            TunTapFD("tun144", True)
    assert info.value.attempt == "open"
    assert info.value.error_code == errno.ENOENT


def test_ioctl_failure_closes_descriptor():
    fd = _open_null()
    with mock.patch("os.open", return_value=fd), mock.patch(
        "fcntl.ioctl", side_effect=PermissionError(errno.EPERM, "Operation not permitted")
    ):
        with pytest.raises(UnixError) as info:
            TunFD("tun144")
    assert info.value.attempt == "ioctl"
    assert info.value.error_code == errno.EPERM
    with pytest.raises(OSError):
        os.fstat(fd)