"""Networking building blocks: buffers, integer parsing, file descriptors, an event loop, addresses, sockets and TUN/TAP devices."""

__version__ = "0.1.0"