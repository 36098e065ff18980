"""Command sequencer -- send a batch of robot commands in one go.

Every command of a :class:`CommandSequence` is enqueued on the
controller (one acknowledged round trip each); a final ``Dequeue``
makes the controller execute the whole batch in order and reply once
it has finished.

Failure semantics:
    The first refused enqueue/dequeue stops the batch and raises
    :class:`SequenceError`.  Commands already acknowledged stay queued on
    the controller -- they are *not* cleared automatically.  Transport
    errors propagate unwrapped.
"""

from __future__ import annotations

import logging
from typing import Any

from inovo_control.context.builtin import ControllerContext
from inovo_control.context.machine import ContextGuard
from inovo_control.errors import ProtocolResponseError, SequenceError
from inovo_control.protocol.commands import Dequeue, Enqueue
from inovo_control.protocol.sequence import CommandSequence

logger = logging.getLogger(__name__)


def _enqueue_all(machine: Any, sequence: CommandSequence) -> None:
    for index, command in enumerate(sequence):
        try:
            machine.instruction_assert_ok(Enqueue(command))
        except ProtocolResponseError as exc:
            logger.error(
                "Enqueue %d/%d refused: %r", index + 1, len(sequence), exc.raw,
            )
            raise SequenceError(index, command, enqueued=index) from exc


def _dequeue(machine: Any, sequence: CommandSequence, *, push: bool) -> None:
    try:
        machine.instruction_assert_ok(Dequeue(push=push))
    except ProtocolResponseError as exc:
        logger.error("Dequeue refused: %r", exc.raw)
        raise SequenceError(len(sequence), None, enqueued=len(sequence)) from exc


class SequenceContext(ControllerContext):
    """Run a batch and open a controller-side context; exit pops it.

    Only the controller's context/queue pointer is reverted on exit, not
    the physical effect of the batch.
    """

    def __init__(self, sequence: CommandSequence) -> None:
        super().__init__(Dequeue(push=True))
        self.sequence = sequence

    def enter(self, machine: Any) -> None:
        _enqueue_all(machine, self.sequence)
        _dequeue(machine, self.sequence, push=True)

    def label(self) -> str:
        return f"sequence[{len(self.sequence)}]"


class Sequencer:
    """Batch sender bound to one machine.

    Parameters
    ----------
    machine : Robot
        Anything with ``instruction_assert_ok(instruction)`` (and, for
        :meth:`with_sequence`, the context machine API).
    """

    def __init__(self, machine: Any) -> None:
        self._machine = machine

    def send(self, sequence: CommandSequence) -> None:
        """Enqueue every command, then dequeue to execute the batch.

        Raises
        ------
        SequenceError
            On the first refused enqueue or dequeue.
        TransportError
            On socket failure.
        """
        logger.info("Sending sequence of %d command(s)", len(sequence))
        _enqueue_all(self._machine, sequence)
        _dequeue(self._machine, sequence, push=False)

    def with_sequence(self, sequence: CommandSequence) -> ContextGuard:
        """Send *sequence* as a context; the guard pops it on close."""
        logger.info("Sending sequence of %d command(s) as context", len(sequence))
        return self._machine.scoped(SequenceContext(sequence))
