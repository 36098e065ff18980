"""Robot poses -- cartesian transforms and joint coordinates.

Two immutable pose types share the :class:`Pose` base:

``CartesianPose``
    Tool transform in **millimetres** and **degrees**.  Orientation uses
    extrinsic X-Y-Z Euler angles (``R = Rz @ Ry @ Rx``), matching the
    controller's convention.  Composition and inversion are rigid-body
    (SE(3)) operations computed with ``scipy.spatial.transform``.

``JointPose``
    Six joint angles in **degrees**.  Composition is element-wise
    addition, negation is element-wise.

Requests carry mm / degrees as-is (:meth:`Pose.to_wire_tokens`).  Query
replies come back in metres and radians and are converted in
:mod:`inovo_control.protocol.codec`.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from enum import Enum
from typing import ClassVar, Sequence

import numpy as np
from scipy.spatial.transform import Rotation, Slerp

# Euler convention used by the controller (lowercase = extrinsic).
EULER_SEQ = "xyz"

MM_PER_M = 1000.0


def deg_to_rad(deg: float) -> float:
    """Convert degrees to radians."""
    return deg / 180.0 * math.pi


def rad_to_deg(rad: float) -> float:
    """Convert radians to degrees."""
    return rad * 180.0 / math.pi


class PoseKind(Enum):
    """Which kind of pose a target or query refers to.

    The value doubles as the wire discriminator token.
    """

    CARTESIAN = "transform"
    JOINT = "joint"


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Pose(ABC):
    """Base class for all robot poses."""

    kind: ClassVar[PoseKind]

    def values(self) -> tuple[float, ...]:
        """The six numeric components in declaration order."""
        return tuple(getattr(self, f.name) for f in fields(self))

    @abstractmethod
    def negate(self) -> Pose:
        """Return the pose that undoes this one when used as a delta."""

    @abstractmethod
    def compose(self, other: Pose) -> Pose:
        """Chain *other* onto this pose (``self * other``)."""

    def then(self, other: Pose) -> Pose:
        """Apply *other* after this pose (``other * self``)."""
        return other.compose(self)

    def to_wire_tokens(self) -> list[str]:
        """Kind token followed by six fixed-precision fields."""
        # round(...) + 0.0 folds -0.0 and tiny negatives into "0.00"
        return [
            self.kind.value,
            *(f"{round(v, 2) + 0.0:8.2f}" for v in self.values()),
        ]

    def _check_same_kind(self, other: Pose) -> None:
        if not isinstance(other, type(self)):
            raise TypeError(
                f"Cannot combine {type(self).__name__} with "
                f"{type(other).__name__}"
            )

    def __neg__(self) -> Pose:
        return self.negate()


# ---------------------------------------------------------------------------
# Cartesian
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CartesianPose(Pose):
    """Tool transform.

    Parameters
    ----------
    x, y, z : float
        Translation in mm.
    rx, ry, rz : float
        Extrinsic X-Y-Z Euler angles in degrees.
    """

    kind: ClassVar[PoseKind] = PoseKind.CARTESIAN

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    rx: float = 0.0
    ry: float = 0.0
    rz: float = 0.0

    @classmethod
    def identity(cls) -> CartesianPose:
        return cls()

    @classmethod
    def from_vector(cls, x: float, y: float, z: float) -> CartesianPose:
        """Pure translation."""
        return cls(x=x, y=y, z=z)

    @classmethod
    def from_euler(cls, rx: float, ry: float, rz: float) -> CartesianPose:
        """Pure rotation."""
        return cls(rx=rx, ry=ry, rz=rz)

    @property
    def vector(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @property
    def euler(self) -> tuple[float, float, float]:
        return (self.rx, self.ry, self.rz)

    def vector_only(self) -> CartesianPose:
        """Drop the rotation, keep the translation."""
        return CartesianPose.from_vector(*self.vector)

    # -- isometry helpers -------------------------------------------------

    def _rotation(self) -> Rotation:
        return Rotation.from_euler(EULER_SEQ, self.euler, degrees=True)

    @classmethod
    def _from_parts(
        cls, rotation: Rotation, translation: np.ndarray,
    ) -> CartesianPose:
        rx, ry, rz = rotation.as_euler(EULER_SEQ, degrees=True)
        tx, ty, tz = translation
        return cls(
            x=float(tx), y=float(ty), z=float(tz),
            rx=float(rx), ry=float(ry), rz=float(rz),
        )

    # -- algebra ------------------------------------------------------------

    def negate(self) -> CartesianPose:
        inv = self._rotation().inv()
        return self._from_parts(inv, -inv.apply(np.asarray(self.vector)))

    def compose(self, other: Pose) -> CartesianPose:
        self._check_same_kind(other)
        rot = self._rotation()
        translation = rot.apply(np.asarray(other.vector)) + np.asarray(
            self.vector
        )
        return self._from_parts(rot * other._rotation(), translation)

    def interpolate(self, other: CartesianPose, t: float) -> CartesianPose:
        """Lerp the translation and slerp the rotation, ``t`` in [0, 1]."""
        self._check_same_kind(other)
        slerp = Slerp(
            [0.0, 1.0],
            Rotation.concatenate([self._rotation(), other._rotation()]),
        )
        translation = (1.0 - t) * np.asarray(self.vector) + t * np.asarray(
            other.vector
        )
        return self._from_parts(slerp([t])[0], translation)

    def __mul__(self, other: CartesianPose) -> CartesianPose:
        return self.compose(other)


# ---------------------------------------------------------------------------
# Joint
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class JointPose(Pose):
    """Six joint angles in degrees."""

    kind: ClassVar[PoseKind] = PoseKind.JOINT

    j1: float = 0.0
    j2: float = 0.0
    j3: float = 0.0
    j4: float = 0.0
    j5: float = 0.0
    j6: float = 0.0

    @classmethod
    def identity(cls) -> JointPose:
        return cls()

    @classmethod
    def from_values(cls, q: Sequence[float]) -> JointPose:
        """Build from a six-element sequence.

        Raises
        ------
        ValueError
            If *q* does not contain exactly six values.
        """
        if len(q) != 6:
            raise ValueError(f"JointPose requires 6 values, got {len(q)}")
        return cls(*(float(v) for v in q))

    def negate(self) -> JointPose:
        return JointPose.from_values([-v for v in self.values()])

    def compose(self, other: Pose) -> JointPose:
        self._check_same_kind(other)
        return JointPose.from_values(
            [a + b for a, b in zip(self.values(), other.values())]
        )

    def interpolate(self, other: JointPose, t: float) -> JointPose:
        self._check_same_kind(other)
        return JointPose.from_values(
            [a * (1.0 - t) + b * t for a, b in zip(self.values(), other.values())]
        )

    def __add__(self, other: JointPose) -> JointPose:
        return self.compose(other)

    def __sub__(self, other: JointPose) -> JointPose:
        return self.compose(other.negate())
