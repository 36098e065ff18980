"""
IVA protocol module.

Defines the robot command / instruction vocabulary as immutable
dataclasses, motion parameters, command sequences, and the codec that
turns instructions into wire tokens and replies into values.
"""

from inovo_control.protocol.codec import (
    decode_pose,
    decode_scalar,
    encode,
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
    GripperCommand,
    GripperGet,
    GripperSet,
    Instruction,
    IOSource,
    IOType,
    Motion,
    MotionMode,
    Pop,
    Query,
    QueryData,
    QueryPose,
    QueryTarget,
    RobotCommand,
    SetParameter,
    Sleep,
    Synchronize,
)
from inovo_control.protocol.motion_param import MotionParam
from inovo_control.protocol.sequence import CommandSequence

__all__ = [
    "CommandSequence",
    "Custom",
    "CustomCommand",
    "Dequeue",
    "Digital",
    "DigitalGet",
    "DigitalSet",
    "Enqueue",
    "Execute",
    "Gripper",
    "GripperActivate",
    "GripperCommand",
    "GripperGet",
    "GripperSet",
    "IOSource",
    "IOType",
    "Instruction",
    "Motion",
    "MotionMode",
    "MotionParam",
    "Pop",
    "Query",
    "QueryData",
    "QueryPose",
    "QueryTarget",
    "RobotCommand",
    "SetParameter",
    "Sleep",
    "Synchronize",
    "decode_pose",
    "decode_scalar",
    "encode",
    "expect_ok",
    "to_wire",
]
