# netsponge

Small building blocks for user-space networking code on Linux.

## Modules

- `netsponge.util`
  - `InternetChecksum` is the Internet (ones' complement) checksum. Feed it
    bytes with `add()`, and byte pairing carries over from one call to the
    next. `value()` returns the 16-bit result.
  - `hexdump(data, indent=0)` prints a hex and ASCII dump to standard output.
  - `timestamp_ms()` returns the milliseconds since its first call.
  - `get_random_generator()` returns a `random.Random` seeded from OS entropy.
  - `system_call(attempt, func, *args, errno_mask=0)` calls `func(*args)` and
    turns an `OSError` into a `UnixError`, which is a kind of `TaggedError`.
    An error whose errno equals `errno_mask` is allowed, and the call then
    returns `None`.
- `netsponge.buffer`
  - `Buffer` is a shared, read-only byte string that can drop bytes from its
    front with `remove_prefix()` and does not copy to do so.
  - `BufferList` is a chain of buffers. It is useful for putting headers in
    front of a payload. `concatenate()` copies it into one `bytes` object.
    `to_buffer()` works only when the list holds at most one buffer.
  - `BufferViewList` is a temporary view over such a chain. `as_iovecs()` gives
    a list of `memoryview`s for vectored writes.
- `netsponge.parser`
  - `NetParser` reads big-endian `u8()`, `u16()` and `u32()` from the front of a
    buffer. It records the first error, for example
    `ParseResult.PACKET_TOO_SHORT`, and does not raise.
  - `NetUnparser` appends such integers to a `bytearray`, cut to the field
    width.
  - `as_string()` gives a `ParseResult`'s display name, such as
    `"PacketTooShort"`.
- `netsponge.file_descriptor`
  - `FileDescriptor` is a handle on a kernel file descriptor that is shared by
    all of its `duplicate()`s.
  - It tracks EOF and counts reads and writes. `read()` reads at most 1 MiB at
    a time.
  - `write()` loops until everything is written, unless `write_all=False`.
  - It is a context manager, and it closes the descriptor on exit.
- `netsponge.eventloop`
  - `EventLoop.add_rule(fd, direction, callback, interest, cancel)` watches a
    descriptor for `Direction.IN` or `Direction.OUT`.
  - `wait_next_event(timeout_ms)` polls once and returns a `Result`: `SUCCESS`,
    `TIMEOUT` or `EXIT`.
  - A rule is dropped, and its `cancel` is called, when its descriptor is
    closed, reaches EOF for reading, or hangs up.
  - A callback that neither reads nor writes its descriptor while still
    interested raises `RuntimeError`, because that would be a busy wait.
- `netsponge.address`
  - `Address(ip, port=0)` is an IPv4 address built from a dotted quad, with no
    name lookup.
  - `Address.resolve(hostname, service)` looks up a name.
  - `Address.from_ipv4_numeric(n)` and `ipv4_numeric()` convert to and from a
    32-bit integer.
  - `ip()`, `port()` and `ip_port()` return the parts, and
    `str(address)` gives `"ip:port"`.
- `netsponge.sockets`
  - `UDPSocket` has `recv()`, which returns a `ReceivedDatagram`, and also
    `sendto()` and `send()`.
  - `TCPSocket` has `listen()` and `accept()`.
  - `LocalStreamSocket` wraps an existing Unix-domain stream descriptor.
  - All of them are `FileDescriptor`s with `bind()`, `connect()`, `shutdown()`,
    `local_address()`, `peer_address()` and `set_reuseaddr()`.
- `netsponge.tun`
  - `TunFD` and `TapFD` open an existing persistent TUN or TAP device through
    `/dev/net/tun`. They need Linux and a device that was set up beforehand.

## Example

```python
from netsponge.buffer import Buffer
from netsponge.parser import NetParser, NetUnparser
from netsponge.util import InternetChecksum

out = bytearray()
NetUnparser.u16(out, 0x4500)
NetUnparser.u32(out, 0xDEADBEEF)

parser = NetParser(Buffer(bytes(out)))
assert parser.u16() == 0x4500
assert parser.u32() == 0xDEADBEEF
assert not parser.error()

checksum = InternetChecksum()
checksum.add(bytes(out))
print(hex(checksum.value()))
```

```python
from netsponge.address import Address
from netsponge.sockets import UDPSocket

with UDPSocket() as sock:
    sock.bind(Address("127.0.0.1", 0))
    print(sock.local_address())
```

## What it does not do

This package holds only the low-level pieces.

- It has no TCP implementation of its own. There is no byte stream,
  reassembler, sender, receiver or connection state machine. Its `TCPSocket`
  uses the kernel's TCP.
- It has no IP, Ethernet or ARP packet types.
- It provides no command-line programs.

## Running the tests

```
pip install -e .[test]
pytest
```