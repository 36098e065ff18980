"""Exception hierarchy shared by the protocol, context and hardware layers.

Every error raised by this package derives from :class:`RobotError` so
callers can catch the whole family at once.  Configuration errors live
with the loader (:class:`inovo_control.configs.loader.ConfigError`).
"""

from __future__ import annotations


class RobotError(Exception):
    """Base exception for all robot client errors."""

    pass


class TransportError(RobotError):
    """Socket-level failure while sending or receiving a message.

    Fatal to the in-flight call.  Never retried by the command layer.
    """

    pass


class ProtocolResponseError(RobotError):
    """The controller replied with something other than what was expected.

    Parameters
    ----------
    raw : str
        The reply text exactly as received.
    """

    def __init__(self, raw: str, message: str | None = None) -> None:
        self.raw = raw
        super().__init__(message or f"Unexpected response: {raw!r}")


class ResponseParseError(ProtocolResponseError):
    """A query reply could not be parsed into the requested value."""

    def __init__(self, raw: str, reason: str = "") -> None:
        detail = f" ({reason})" if reason else ""
        super().__init__(raw, f"Cannot parse response {raw!r}{detail}")


class ContextStackError(RobotError):
    """Misuse of a context machine's stack."""

    pass


class NoContextToExit(ContextStackError):
    """``exit()`` was called while no context is active."""

    def __init__(self) -> None:
        super().__init__("No context to exit: the context stack is empty")


class SequenceError(RobotError):
    """An enqueue or dequeue step of a command batch was refused.

    Commands acknowledged before the failure stay queued on the
    controller; the caller decides how to clean up.

    Parameters
    ----------
    index : int
        Position of the failing command, or ``len(sequence)`` when the
        trailing dequeue failed.
    command : RobotCommand | None
        The command whose enqueue failed; ``None`` for the dequeue step.
    enqueued : int
        Number of commands the controller had already acknowledged.
    """

    def __init__(self, index: int, command: object, enqueued: int) -> None:
        self.index = index
        self.command = command
        self.enqueued = enqueued
        step = "dequeue" if command is None else f"enqueue #{index}"
        super().__init__(
            f"Sequence {step} failed after {enqueued} queued command(s)"
        )
