"""Built-in reversible operations: temporary pose, motion parameters and
controller-side contexts.

The contexts work against any machine that provides:

- ``current_pose(kind) -> Pose``
- ``send_command(command: RobotCommand) -> None``
- ``param_stack: list[MotionParam]`` and ``default_param: MotionParam``
  (parameter context only)
- ``instruction_assert_ok(instruction) -> None`` (controller context only)

:class:`inovo_control.hardware.robot.Robot` is the production machine.
"""

from __future__ import annotations

import logging
from typing import Any

from inovo_control.context.machine import Context
from inovo_control.geometry.pose import Pose
from inovo_control.protocol.commands import (
    Instruction,
    Motion,
    MotionMode,
    Pop,
    SetParameter,
)
from inovo_control.protocol.motion_param import MotionParam

logger = logging.getLogger(__name__)


class MotionContext(Context):
    """Move the arm and move it back on exit.

    Absolute modes snapshot the current pose (of the target's kind) and
    return to it.  Relative modes return by the negated delta.

    Parameters
    ----------
    mode : MotionMode
        Motion mode used both to enter and to restore.
    pose : Pose
        Target (absolute) or delta (relative).
    """

    def __init__(self, mode: MotionMode, pose: Pose) -> None:
        self.mode = mode
        self.pose = pose
        self._restore: Pose | None = None

    def enter(self, machine: Any) -> None:
        if self.mode.is_relative:
            machine.send_command(Motion(self.mode, self.pose))
            self._restore = self.pose.negate()
        else:
            restore = machine.current_pose(self.pose.kind)
            machine.send_command(Motion(self.mode, self.pose))
            self._restore = restore

    def exit(self, machine: Any) -> None:
        if self._restore is None:
            raise RuntimeError(f"{self.label()} exited before it was entered")
        restore, self._restore = self._restore, None
        machine.send_command(Motion(self.mode, restore))

    def label(self) -> str:
        return f"motion[{self.mode.value}]"


class ParamContext(Context):
    """Apply motion parameters and restore the previous ones on exit.

    The machine's ``param_stack`` records every active parameter set
    independently of the general context stack, so exits always
    re-send the value that was active before the matching enter.
    """

    def __init__(self, param: MotionParam) -> None:
        self.param = param

    def enter(self, machine: Any) -> None:
        machine.send_command(SetParameter(self.param))
        if not machine.param_stack:
            machine.param_stack.append(machine.default_param)
        machine.param_stack.append(self.param)

    def exit(self, machine: Any) -> None:
        stack: list[MotionParam] = machine.param_stack
        if stack:
            stack.pop()
        else:
            logger.warning("Parameter stack already empty on exit")
        restore = stack[-1] if stack else machine.default_param
        machine.send_command(SetParameter(restore))

    def label(self) -> str:
        return f"param[speed={self.param.speed:g}%]"


class ControllerContext(Context):
    """Open a context on the controller itself; exit pops it.

    *instruction* must be a context-opening instruction such as
    ``Execute(command, push=True)`` or ``Dequeue(push=True)``.  The
    controller keeps its own stack; exit only sends :class:`Pop`, nothing
    is reverted on the client side.
    """

    def __init__(self, instruction: Instruction) -> None:
        self.instruction = instruction

    def enter(self, machine: Any) -> None:
        machine.instruction_assert_ok(self.instruction)

    def exit(self, machine: Any) -> None:
        machine.instruction_assert_ok(Pop())

    def label(self) -> str:
        return f"controller[{type(self.instruction).__name__.lower()}]"
