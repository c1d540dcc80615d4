"""Waits for readiness on file descriptors and runs the matching callbacks."""

from __future__ import annotations

import enum
import select
from dataclasses import dataclass
from typing import Callable

from .file_descriptor import FileDescriptor

Callback = Callable[[], None]
Interest = Callable[[], bool]


class Direction(enum.IntEnum):
    """Whether a rule waits for its descriptor to become readable or writable."""

    IN = select.POLLIN
    OUT = select.POLLOUT


class Result(enum.Enum):
    """Outcome of one EventLoop.wait_next_event call."""

    SUCCESS = enum.auto()  # at least one rule was serviced
    TIMEOUT = enum.auto()  # nothing became ready before the timeout
    EXIT = enum.auto()  # nothing left to poll; stop calling wait_next_event


@dataclass(eq=False)
class _Rule:
    fd: FileDescriptor
    direction: Direction
    callback: Callback
    interest: Interest
    cancel: Callback

    def service_count(self) -> int:
        return self.fd.read_count() if self.direction is Direction.IN else self.fd.write_count()


def _always() -> bool:
    return True


def _nothing() -> None:
    return None


class EventLoop:
    """Polls a set of rules and calls back when their descriptors are ready.

    A rule is dropped (and its ``cancel`` called) once its descriptor is
    closed, reaches EOF for reading, or hangs up. Every callback must read or
    write its descriptor, or its ``interest`` must turn false; otherwise a
    busy wait is reported as RuntimeError.
    """

    def __init__(self) -> None:
        self._rules: list[_Rule] = []

    def add_rule(
        self,
        fd: FileDescriptor,
        direction: Direction,
        callback: Callback,
        interest: Interest = _always,
        cancel: Callback = _nothing,
    ) -> None:
        """Call ``callback`` whenever ``fd`` is ready in ``direction`` and ``interest()`` holds."""
        self._rules.append(_Rule(fd.duplicate(), Direction(direction), callback, interest, cancel))

    def wait_next_event(self, timeout_ms: int) -> Result:
        """Poll once (negative timeout waits forever) and service the ready rules."""
        polled: list[tuple[_Rule, int]] = []
        something_to_poll = False

        for rule in list(self._rules):
            if (rule.direction is Direction.IN and rule.fd.eof()) or rule.fd.closed():
                rule.cancel()
                self._rules.remove(rule)
                continue
            if rule.interest():
                polled.append((rule, int(rule.direction)))
                something_to_poll = True
            else:
                polled.append((rule, 0))  # still polled so errors are reported

        if not something_to_poll:
            return Result.EXIT

        poller = select.poll()
        masks: dict[int, int] = {}
        for rule, events in polled:
            num = rule.fd.fd_num()
            masks[num] = masks.get(num, 0) | events
        for num, mask in masks.items():
            poller.register(num, mask)

        try:
            ready = poller.poll(timeout_ms)
        except InterruptedError:
            return Result.EXIT
        except OSError:
            ready = []
        else:
            if not ready:
                return Result.TIMEOUT

        revents_by_fd = dict(ready)

        for rule, events in polled:
            revents = revents_by_fd.get(rule.fd.fd_num(), 0)
            if revents & (select.POLLERR | select.POLLNVAL):
                raise RuntimeError("EventLoop: error on polled file descriptor")

            poll_ready = bool(revents & events)
            poll_hup = bool(revents & select.POLLHUP)
            if poll_hup and events and not poll_ready:
                # only a hangup: nothing more will ever be readable or writable
                rule.cancel()
                self._rules.remove(rule)
                continue

            if poll_ready:
                count_before = rule.service_count()
                rule.callback()
                if count_before == rule.service_count() and rule.interest():
                    raise RuntimeError(
                        "EventLoop: busy wait detected: callback did not read/write fd and is still interested"
                    )

        return Result.SUCCESS