"""Inovo robot arm client over the IVA protocol.

:class:`Robot` is the context machine of this package: besides plain
commands (motion, parameters, gripper, IO, queries) it can enter
reversible contexts that put the arm back the way it was.

Every method performs whole request/response round trips before it
returns.  The wire carries no request IDs, so a robot instance must be
driven by a single caller; there is no internal locking.

Usage::

    from inovo_control.configs.loader import load_config
    from inovo_control.hardware.robot import Robot

    with Robot.from_config(load_config()) as bot:
        home = bot.current_transform()
        with bot.with_param(MotionParam().set_speed(20.0)):
            with bot.with_linear_relative(CartesianPose(z=50.0)):
                bot.sequence(CommandSequence().then_sleep(1.0))
        # arm back down, parameters restored
"""

from __future__ import annotations

import logging
from typing import Any

from inovo_control.configs.loader import RobotConfig
from inovo_control.context.builtin import ControllerContext, MotionContext, ParamContext
from inovo_control.context.machine import ContextGuard, ContextMachine
from inovo_control.geometry.pose import CartesianPose, JointPose, Pose, PoseKind
from inovo_control.hardware.sequencer import Sequencer
from inovo_control.hardware.transport import LineTransport, Transport
from inovo_control.protocol.codec import (
    Scalar,
    decode_pose,
    decode_scalar,
    expect_ok,
    to_wire,
)
from inovo_control.protocol.commands import (
    Custom,
    CustomCommand,
    Dequeue,
    Digital,
    DigitalGet,
    DigitalSet,
    Enqueue,
    Execute,
    Gripper,
    GripperActivate,
    GripperGet,
    GripperSet,
    Instruction,
    IOSource,
    Motion,
    MotionMode,
    Pop,
    Query,
    QueryData,
    QueryPose,
    RobotCommand,
    SetParameter,
    Sleep,
    Synchronize,
)
from inovo_control.protocol.motion_param import MotionParam
from inovo_control.protocol.sequence import CommandSequence

logger = logging.getLogger(__name__)


class Robot(ContextMachine):
    """Synchronous IVA client and context machine.

    Parameters
    ----------
    transport : Transport
        Connected request/response channel.
    default_param : MotionParam | None
        Parameters restored when the outermost parameter context exits.
        ``None`` uses ``MotionParam()``.
    """

    def __init__(
        self,
        transport: Transport,
        default_param: MotionParam | None = None,
    ) -> None:
        super().__init__()
        self._transport = transport
        self.default_param = default_param if default_param is not None else MotionParam()
        self.param_stack: list[MotionParam] = []
        self._sequencer = Sequencer(self)

    @classmethod
    def from_config(cls, config: RobotConfig) -> Robot:
        """Open the transport described by ``config.connection``."""
        conn = config.connection
        if conn.mode == "listen":
            transport = LineTransport.listen(
                conn.host,
                conn.port,
                timeout=conn.timeout_s,
                accept_timeout=conn.accept_timeout_s,
            )
        else:
            transport = LineTransport.connect(
                conn.host,
                conn.port,
                timeout=conn.timeout_s,
                attempts=conn.connect_attempts,
                interval=conn.connect_interval_s,
            )
        return cls(transport, default_param=config.default_param)

    # ------------------------------------------------------------------
    # Round trips
    # ------------------------------------------------------------------

    def instruction(self, instruction: Instruction) -> str:
        """Send *instruction* and return the raw reply line."""
        self._transport.send(to_wire(instruction))
        return self._transport.receive()

    def instruction_assert_ok(self, instruction: Instruction) -> None:
        """Send *instruction* and require the ``OK`` acknowledgement.

        Raises
        ------
        ProtocolResponseError
            If the controller replied with anything else.
        """
        expect_ok(self.instruction(instruction))

    def instruction_return(
        self, instruction: Instruction, expected: type | None = None,
    ) -> Scalar:
        """Send *instruction* and decode the reply as a scalar."""
        return decode_scalar(self.instruction(instruction), expected)

    # ------------------------------------------------------------------
    # Robot commands
    # ------------------------------------------------------------------

    def execute(self, command: RobotCommand) -> None:
        """Execute *command* immediately."""
        self.instruction_assert_ok(Execute(command))

    def send_command(self, command: RobotCommand) -> None:
        """Alias of :meth:`execute` used by the built-in contexts."""
        self.execute(command)

    def motion(self, mode: MotionMode, pose: Pose) -> None:
        self.execute(Motion(mode, pose))

    def linear(self, pose: Pose) -> None:
        self.motion(MotionMode.LINEAR, pose)

    def linear_relative(self, pose: Pose) -> None:
        self.motion(MotionMode.LINEAR_RELATIVE, pose)

    def joint(self, pose: Pose) -> None:
        self.motion(MotionMode.JOINT, pose)

    def joint_relative(self, pose: Pose) -> None:
        self.motion(MotionMode.JOINT_RELATIVE, pose)

    def sleep(self, seconds: float) -> None:
        self.execute(Sleep(seconds))

    def synchronize(self) -> None:
        self.execute(Synchronize())

    def set_param(self, param: MotionParam) -> None:
        """Set motion parameters outside any context (not restored)."""
        self.execute(SetParameter(param))

    # ------------------------------------------------------------------
    # Queue
    # ------------------------------------------------------------------

    def enqueue(self, command: RobotCommand) -> None:
        self.instruction_assert_ok(Enqueue(command))

    def dequeue(self, push: bool = False) -> None:
        self.instruction_assert_ok(Dequeue(push=push))

    def pop(self) -> None:
        self.instruction_assert_ok(Pop())

    def sequence(self, sequence: CommandSequence) -> None:
        """Run *sequence* as one batch (see :class:`Sequencer`)."""
        self._sequencer.send(sequence)

    def with_sequence(self, sequence: CommandSequence) -> ContextGuard[Robot]:
        return self._sequencer.with_sequence(sequence)

    # ------------------------------------------------------------------
    # Reversible contexts
    # ------------------------------------------------------------------

    def with_pose(self, mode: MotionMode, pose: Pose) -> ContextGuard[Robot]:
        """Move now; move back when the guard closes."""
        return self.scoped(MotionContext(mode, pose))

    def with_linear(self, pose: Pose) -> ContextGuard[Robot]:
        return self.with_pose(MotionMode.LINEAR, pose)

    def with_linear_relative(self, pose: Pose) -> ContextGuard[Robot]:
        return self.with_pose(MotionMode.LINEAR_RELATIVE, pose)

    def with_joint(self, pose: Pose) -> ContextGuard[Robot]:
        return self.with_pose(MotionMode.JOINT, pose)

    def with_joint_relative(self, pose: Pose) -> ContextGuard[Robot]:
        return self.with_pose(MotionMode.JOINT_RELATIVE, pose)

    def with_param(self, param: MotionParam) -> ContextGuard[Robot]:
        """Apply *param* now; restore the previous parameters on close."""
        return self.scoped(ParamContext(param))

    # ------------------------------------------------------------------
    # Controller-side contexts (closed with Pop)
    # ------------------------------------------------------------------

    def with_execute(self, command: RobotCommand) -> ContextGuard[Robot]:
        """Execute *command* inside a controller context; close pops it.

        Unlike :meth:`with_pose` and :meth:`with_param`, the client sends
        no compensating command on close: the controller decides what
        ``Pop`` reverts.
        """
        return self.scoped(ControllerContext(Execute(command, push=True)))

    def with_sleep(self, seconds: float) -> ContextGuard[Robot]:
        return self.with_execute(Sleep(seconds))

    def with_set_param(self, param: MotionParam) -> ContextGuard[Robot]:
        return self.with_execute(SetParameter(param))

    def with_dequeue(self) -> ContextGuard[Robot]:
        """Run whatever is queued on the controller as a context."""
        return self.scoped(ControllerContext(Dequeue(push=True)))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def current_pose(self, kind: PoseKind = PoseKind.CARTESIAN) -> Pose:
        """Query the current TCP transform or joint coordinates."""
        return decode_pose(self.instruction(Query(QueryPose(kind))), kind)

    def current_transform(self) -> CartesianPose:
        return self.current_pose(PoseKind.CARTESIAN)  # type: ignore[return-value]

    def current_joint(self) -> JointPose:
        return self.current_pose(PoseKind.JOINT)  # type: ignore[return-value]

    def get_data(self, key: str, expected: type | None = None) -> Scalar:
        """Read *key* from the runtime's data dictionary as a scalar."""
        return self.instruction_return(Query(QueryData(key)), expected)

    def get_data_pose(self, key: str, kind: PoseKind = PoseKind.CARTESIAN) -> Pose:
        """Read a pose or waypoint stored under *key*."""
        return decode_pose(self.instruction(Query(QueryData(key))), kind)

    # ------------------------------------------------------------------
    # Digital IO
    # ------------------------------------------------------------------

    def io_set(self, source: IOSource, port: int, state: bool) -> None:
        self.instruction_assert_ok(Digital(source, port, DigitalSet(state)))

    def io_get(self, source: IOSource, port: int) -> bool:
        return self.instruction_return(  # type: ignore[return-value]
            Digital(source, port, DigitalGet()), bool,
        )

    def beckhoff_set(self, port: int, state: bool) -> None:
        self.io_set(IOSource.BECKHOFF, port, state)

    def beckhoff_get(self, port: int) -> bool:
        return self.io_get(IOSource.BECKHOFF, port)

    def wrist_set(self, port: int, state: bool) -> None:
        self.io_set(IOSource.WRIST, port, state)

    def wrist_get(self, port: int) -> bool:
        return self.io_get(IOSource.WRIST, port)

    # ------------------------------------------------------------------
    # Gripper
    # ------------------------------------------------------------------

    def gripper_activate(self) -> None:
        self.instruction_assert_ok(Gripper(GripperActivate()))

    def gripper_set(self, label: str) -> None:
        """Move the gripper to a taught position label (e.g. ``"open"``)."""
        self.instruction_assert_ok(Gripper(GripperSet(label)))

    def gripper_get(self) -> float:
        """Current gripper width as reported by the controller."""
        return self.instruction_return(  # type: ignore[return-value]
            Gripper(GripperGet()), float,
        )

    # ------------------------------------------------------------------
    # Custom commands
    # ------------------------------------------------------------------

    def custom(self, command: CustomCommand) -> str:
        """Run a custom command and return the raw reply."""
        return self.instruction(Custom(command))

    def custom_and(self, command: CustomCommand) -> None:
        """Run a custom command and require ``OK``."""
        self.instruction_assert_ok(Custom(command))

    def custom_keyword(self, keyword: str) -> None:
        self.custom_and(CustomCommand.keyword(keyword))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the transport.  Open contexts are reported, not exited."""
        if self.context_depth:
            logger.warning(
                "Closing robot with %d open context(s): %s",
                self.context_depth, ", ".join(self.contexts),
            )
        self._transport.close()

    def __enter__(self) -> Robot:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
