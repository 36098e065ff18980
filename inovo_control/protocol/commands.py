"""Command and instruction vocabulary of the IVA protocol.

Two layers of immutable, slotted dataclasses:

RobotCommand
    Something the arm *does*: move, change motion parameters, sleep,
    synchronise.  Robot commands can be executed immediately or queued
    for a batch.

Instruction
    One request/response round trip.  Wraps a robot command (execute,
    enqueue) or addresses another subsystem (gripper, digital IO,
    queries, custom runtime commands).

Encoding to wire tokens lives in :mod:`inovo_control.protocol.codec`;
these classes only carry data.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from enum import Enum

from inovo_control.geometry.pose import Pose, PoseKind
from inovo_control.protocol.motion_param import MotionParam

# ---------------------------------------------------------------------------
# Robot commands
# ---------------------------------------------------------------------------


class MotionMode(Enum):
    """Motion interpolation mode.  Value is the wire token."""

    LINEAR = "linear"
    LINEAR_RELATIVE = "linear_relative"
    JOINT = "joint"
    JOINT_RELATIVE = "joint_relative"

    @property
    def is_relative(self) -> bool:
        return self in (MotionMode.LINEAR_RELATIVE, MotionMode.JOINT_RELATIVE)


@dataclass(frozen=True, slots=True)
class RobotCommand(ABC):
    """Base class for all robot commands."""

    pass


@dataclass(frozen=True, slots=True)
class Motion(RobotCommand):
    """Move to (absolute) or by (relative) *pose*.

    Absolute joint moves accept either pose kind; the controller solves
    inverse kinematics for cartesian targets.
    """

    mode: MotionMode
    pose: Pose

    @classmethod
    def linear(cls, pose: Pose) -> Motion:
        return cls(MotionMode.LINEAR, pose)

    @classmethod
    def linear_relative(cls, pose: Pose) -> Motion:
        return cls(MotionMode.LINEAR_RELATIVE, pose)

    @classmethod
    def joint(cls, pose: Pose) -> Motion:
        return cls(MotionMode.JOINT, pose)

    @classmethod
    def joint_relative(cls, pose: Pose) -> Motion:
        return cls(MotionMode.JOINT_RELATIVE, pose)


@dataclass(frozen=True, slots=True)
class SetParameter(RobotCommand):
    """Replace the active motion parameters."""

    param: MotionParam


@dataclass(frozen=True, slots=True)
class Sleep(RobotCommand):
    """Pause the controller for *seconds*."""

    seconds: float

    def __post_init__(self) -> None:
        if self.seconds < 0:
            raise ValueError(f"Sleep seconds must be >= 0, got {self.seconds}")


@dataclass(frozen=True, slots=True)
class Synchronize(RobotCommand):
    """Wait until all preceding motion has physically completed."""

    pass


# ---------------------------------------------------------------------------
# Sub-commands of instructions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GripperCommand(ABC):
    pass


@dataclass(frozen=True, slots=True)
class GripperActivate(GripperCommand):
    pass


@dataclass(frozen=True, slots=True)
class GripperGet(GripperCommand):
    """Read the gripper width."""

    pass


@dataclass(frozen=True, slots=True)
class GripperSet(GripperCommand):
    """Move the gripper to a position label taught on the controller."""

    label: str


class IOSource(Enum):
    """Digital IO bank."""

    BECKHOFF = "beckhoff"
    WRIST = "wrist"


@dataclass(frozen=True, slots=True)
class IOType(ABC):
    pass


@dataclass(frozen=True, slots=True)
class DigitalGet(IOType):
    pass


@dataclass(frozen=True, slots=True)
class DigitalSet(IOType):
    state: bool


@dataclass(frozen=True, slots=True)
class QueryTarget(ABC):
    pass


@dataclass(frozen=True, slots=True)
class QueryPose(QueryTarget):
    """Current TCP transform or joint coordinates."""

    kind: PoseKind = PoseKind.CARTESIAN


@dataclass(frozen=True, slots=True)
class QueryData(QueryTarget):
    """A value from the runtime's data dictionary."""

    key: str


@dataclass(frozen=True, slots=True)
class CustomCommand:
    """Free-form command understood by a custom controller program.

    Built from ordered key/value pairs or a single keyword.

    Examples
    --------
    >>> cmd = CustomCommand().add_string("action", "add_limit").add_float("value", 12.0)
    >>> CustomCommand.keyword("LIQUID").tokens
    ('LIQUID',)
    """

    tokens: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def keyword(cls, word: str) -> CustomCommand:
        return cls((word,))

    def add_string(self, key: str, value: str) -> CustomCommand:
        return CustomCommand(self.tokens + (key, value))

    def add_float(self, key: str, value: float) -> CustomCommand:
        return CustomCommand(self.tokens + (key, f"{value:8.5f}"))


# ---------------------------------------------------------------------------
# Instructions (one round trip each)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Instruction(ABC):
    """Base class for all protocol instructions."""

    pass


@dataclass(frozen=True, slots=True)
class Execute(Instruction):
    """Run a robot command now and reply ``OK`` when done.

    With ``push=True`` the controller also opens a context that a later
    :class:`Pop` closes.
    """

    command: RobotCommand
    push: bool = False


@dataclass(frozen=True, slots=True)
class Enqueue(Instruction):
    """Append a robot command to the controller-side batch queue."""

    command: RobotCommand


@dataclass(frozen=True, slots=True)
class Dequeue(Instruction):
    """Execute the whole queued batch in order.

    With ``push=True`` the controller also opens a context that a later
    :class:`Pop` closes.
    """

    push: bool = False


@dataclass(frozen=True, slots=True)
class Pop(Instruction):
    """Close the controller-side context opened by ``Dequeue(push=True)``."""

    pass


@dataclass(frozen=True, slots=True)
class Gripper(Instruction):
    command: GripperCommand


@dataclass(frozen=True, slots=True)
class Digital(Instruction):
    """Read or write one digital IO port."""

    source: IOSource
    port: int
    io: IOType

    def __post_init__(self) -> None:
        if self.port < 0:
            raise ValueError(f"IO port must be >= 0, got {self.port}")


@dataclass(frozen=True, slots=True)
class Query(Instruction):
    target: QueryTarget


@dataclass(frozen=True, slots=True)
class Custom(Instruction):
    command: CustomCommand
