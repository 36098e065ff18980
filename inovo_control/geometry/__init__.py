"""Pose algebra: cartesian transforms and joint coordinates."""

from inovo_control.geometry.pose import (
    CartesianPose,
    JointPose,
    Pose,
    PoseKind,
    deg_to_rad,
    rad_to_deg,
)

__all__ = [
    "CartesianPose",
    "JointPose",
    "Pose",
    "PoseKind",
    "deg_to_rad",
    "rad_to_deg",
]
