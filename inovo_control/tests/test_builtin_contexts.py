"""Tests for the motion, parameter and controller-side contexts.

Runs the built-in contexts against a lightweight machine double that
records sent commands and serves a fixed current pose, so the reversal
logic is checked independently of the wire format.
"""

from __future__ import annotations

import pytest

from inovo_control.context.builtin import ControllerContext, MotionContext, ParamContext
from inovo_control.context.machine import ContextMachine
from inovo_control.geometry.pose import CartesianPose, JointPose, Pose, PoseKind
from inovo_control.protocol.commands import (
    Dequeue,
    Execute,
    Instruction,
    Motion,
    MotionMode,
    Pop,
    RobotCommand,
    SetParameter,
    Sleep,
)
from inovo_control.protocol.motion_param import MotionParam


class MachineDouble(ContextMachine):
    def __init__(self, pose: Pose | None = None) -> None:
        super().__init__()
        self.pose = pose or CartesianPose(100.0, 200.0, 300.0, 0.0, 0.0, 45.0)
        self.sent: list[RobotCommand] = []
        self.queried: list[PoseKind] = []
        self.param_stack: list[MotionParam] = []
        self.default_param = MotionParam()
        self.fail_next_send = False
        self.instructions: list[Instruction] = []

    def current_pose(self, kind: PoseKind) -> Pose:
        self.queried.append(kind)
        return self.pose if kind is self.pose.kind else JointPose(1, 2, 3, 4, 5, 6)

    def send_command(self, command: RobotCommand) -> None:
        if self.fail_next_send:
            self.fail_next_send = False
            raise RuntimeError("send refused")
        self.sent.append(command)

    def instruction_assert_ok(self, instruction: Instruction) -> None:
        if self.fail_next_send:
            self.fail_next_send = False
            raise RuntimeError("instruction refused")
        self.instructions.append(instruction)


@pytest.fixture()
def machine() -> MachineDouble:
    return MachineDouble()


# ---------------------------------------------------------------------------
# Motion
# ---------------------------------------------------------------------------


class TestMotionContext:
    def test_absolute_restores_snapshot(self, machine: MachineDouble) -> None:
        p0 = machine.pose
        target = CartesianPose(0.0, 0.0, 500.0)
        with machine.scoped(MotionContext(MotionMode.LINEAR, target)):
            assert machine.sent == [Motion(MotionMode.LINEAR, target)]
        assert machine.sent[-1] == Motion(MotionMode.LINEAR, p0)
        assert machine.queried == [PoseKind.CARTESIAN]

    def test_absolute_joint_queries_joint_pose(self, machine: MachineDouble) -> None:
        target = JointPose(j2=-45.0)
        with machine.scoped(MotionContext(MotionMode.JOINT, target)):
            pass
        assert machine.queried == [PoseKind.JOINT]
        assert machine.sent[-1] == Motion(MotionMode.JOINT, JointPose(1, 2, 3, 4, 5, 6))

    def test_relative_restores_by_negation(self, machine: MachineDouble) -> None:
        delta = JointPose(j1=10.0, j6=-5.0)
        with machine.scoped(MotionContext(MotionMode.JOINT_RELATIVE, delta)):
            pass
        assert machine.sent == [
            Motion(MotionMode.JOINT_RELATIVE, delta),
            Motion(MotionMode.JOINT_RELATIVE, JointPose(j1=-10.0, j6=5.0)),
        ]
        assert machine.queried == []

    def test_relative_cartesian_uses_isometry_inverse(self, machine: MachineDouble) -> None:
        delta = CartesianPose(z=50.0)
        with machine.scoped(MotionContext(MotionMode.LINEAR_RELATIVE, delta)):
            pass
        restore = machine.sent[-1]
        assert restore.mode is MotionMode.LINEAR_RELATIVE
        assert restore.pose.z == pytest.approx(-50.0)
        assert restore.pose.x == pytest.approx(0.0)

    def test_failed_send_leaves_stack_empty(self, machine: MachineDouble) -> None:
        machine.fail_next_send = True
        with pytest.raises(RuntimeError):
            machine.enter(MotionContext(MotionMode.LINEAR, CartesianPose()))
        assert machine.context_depth == 0
        assert machine.sent == []

    def test_exit_before_enter(self, machine: MachineDouble) -> None:
        with pytest.raises(RuntimeError, match="before it was entered"):
            MotionContext(MotionMode.LINEAR, CartesianPose()).exit(machine)

    def test_label(self) -> None:
        ctx = MotionContext(MotionMode.LINEAR_RELATIVE, CartesianPose())
        assert ctx.label() == "motion[linear_relative]"


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


class TestParamContext:
    def test_stacking_restores_previous_then_default(self, machine: MachineDouble) -> None:
        a = MotionParam().set_speed(10.0)
        b = MotionParam().set_speed(80.0)
        machine.enter(ParamContext(a))
        machine.enter(ParamContext(b))
        assert machine.sent == [SetParameter(a), SetParameter(b)]

        machine.exit()
        assert machine.sent[-1] == SetParameter(a)
        machine.exit()
        assert machine.sent[-1] == SetParameter(machine.default_param)
        assert machine.context_depth == 0

    def test_stack_seeded_with_default(self, machine: MachineDouble) -> None:
        a = MotionParam().set_speed(10.0)
        with machine.scoped(ParamContext(a)):
            assert machine.param_stack == [machine.default_param, a]
        assert machine.param_stack == [machine.default_param]

    def test_failed_send_leaves_param_stack_untouched(self, machine: MachineDouble) -> None:
        machine.fail_next_send = True
        with pytest.raises(RuntimeError):
            machine.enter(ParamContext(MotionParam().set_speed(5.0)))
        assert machine.param_stack == []
        assert machine.context_depth == 0

    def test_empty_param_stack_on_exit_sends_default(
        self, machine: MachineDouble,
    ) -> None:
        ctx = ParamContext(MotionParam().set_speed(5.0))
        ctx.exit(machine)
        assert machine.sent == [SetParameter(machine.default_param)]

    def test_interleaved_with_motion(self, machine: MachineDouble) -> None:
        slow = MotionParam().set_speed(5.0)
        up = CartesianPose(z=10.0)
        with machine.scoped(ParamContext(slow)):
            with machine.scoped(MotionContext(MotionMode.LINEAR_RELATIVE, up)):
                pass
        kinds = [type(c).__name__ for c in machine.sent]
        assert kinds == ["SetParameter", "Motion", "Motion", "SetParameter"]

    def test_label(self) -> None:
        assert ParamContext(MotionParam().set_speed(12.5)).label() == "param[speed=12.5%]"


# ---------------------------------------------------------------------------
# Controller-side
# ---------------------------------------------------------------------------


class TestControllerContext:
    def test_enter_sends_instruction_exit_pops(self, machine: MachineDouble) -> None:
        opening = Execute(Sleep(2.0), push=True)
        with machine.scoped(ControllerContext(opening)):
            assert machine.instructions == [opening]
        assert machine.instructions == [opening, Pop()]
        assert machine.sent == []

    def test_nested_pops_once_per_context(self, machine: MachineDouble) -> None:
        with machine.scoped(ControllerContext(Dequeue(push=True))):
            with machine.scoped(ControllerContext(Execute(Sleep(1.0), push=True))):
                pass
        assert [type(i).__name__ for i in machine.instructions] == [
            "Dequeue", "Execute", "Pop", "Pop",
        ]

    def test_refused_enter_not_pushed(self, machine: MachineDouble) -> None:
        machine.fail_next_send = True
        with pytest.raises(RuntimeError):
            machine.scoped(ControllerContext(Dequeue(push=True)))
        assert machine.context_depth == 0
        assert machine.instructions == []

    def test_label(self) -> None:
        assert ControllerContext(Dequeue(push=True)).label() == "controller[dequeue]"
