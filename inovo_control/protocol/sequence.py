"""Command sequences -- ordered batches of robot commands.

A :class:`CommandSequence` is sent as one logical batch: every command is
enqueued on the controller, then a single dequeue executes them all in
order (see :class:`inovo_control.hardware.sequencer.Sequencer`).

Usage::

    seq = (
        CommandSequence()
        .then_set_param(fast)
        .then_linear_relative(CartesianPose(z=100.0))
        .then_sync()
        .then_sleep(1.0)
    )
    seq = CommandSequence(Motion.joint(q) for q in waypoints)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from inovo_control.geometry.pose import Pose
from inovo_control.protocol.commands import (
    Motion,
    RobotCommand,
    SetParameter,
    Sleep,
    Synchronize,
)
from inovo_control.protocol.motion_param import MotionParam


@dataclass(frozen=True, slots=True, init=False)
class CommandSequence:
    """Immutable, append-only list of :class:`RobotCommand`.

    Parameters
    ----------
    commands : Iterable[RobotCommand]
        Initial commands, in execution order.
    """

    commands: tuple[RobotCommand, ...]

    def __init__(self, commands: Iterable[RobotCommand] = ()) -> None:
        object.__setattr__(self, "commands", tuple(commands))

    def then(self, command: RobotCommand) -> CommandSequence:
        """Return a new sequence with *command* appended."""
        return CommandSequence(self.commands + (command,))

    def then_linear(self, pose: Pose) -> CommandSequence:
        return self.then(Motion.linear(pose))

    def then_linear_relative(self, pose: Pose) -> CommandSequence:
        return self.then(Motion.linear_relative(pose))

    def then_joint(self, pose: Pose) -> CommandSequence:
        return self.then(Motion.joint(pose))

    def then_joint_relative(self, pose: Pose) -> CommandSequence:
        return self.then(Motion.joint_relative(pose))

    def then_sleep(self, seconds: float) -> CommandSequence:
        return self.then(Sleep(seconds))

    def then_sync(self) -> CommandSequence:
        return self.then(Synchronize())

    def then_set_param(self, param: MotionParam) -> CommandSequence:
        return self.then(SetParameter(param))

    def __iter__(self) -> Iterator[RobotCommand]:
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)

    def __getitem__(self, index: int) -> RobotCommand:
        return self.commands[index]
