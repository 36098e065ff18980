"""Shared fixtures: a scripted in-memory transport and a robot bound to it."""

from __future__ import annotations

from collections import deque
from typing import Iterable

import pytest

from inovo_control.hardware.robot import Robot
from inovo_control.hardware.transport import Transport

OK = "OK"


class FakeTransport(Transport):
    """Records every sent line and answers from a reply script.

    Replies are consumed in order; once the script is exhausted every
    request is answered with ``default_reply``.  A scripted exception
    instance is raised instead of returned.
    """

    def __init__(self, replies: Iterable[str | Exception] = (), default_reply: str = OK) -> None:
        self.sent: list[str] = []
        self.replies: deque[str | Exception] = deque(replies)
        self.default_reply = default_reply
        self.closed = False

    def script(self, *replies: str | Exception) -> None:
        self.replies.extend(replies)

    def send(self, message: str) -> None:
        self.sent.append(message)

    def receive(self) -> str:
        reply = self.replies.popleft() if self.replies else self.default_reply
        if isinstance(reply, Exception):
            raise reply
        return reply

    def close(self) -> None:
        self.closed = True

    def verbs(self) -> list[str]:
        """First token of every sent line."""
        return [line.split(",", 1)[0] for line in self.sent]


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def robot(transport: FakeTransport) -> Robot:
    return Robot(transport)
