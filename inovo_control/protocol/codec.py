"""IVA wire codec -- instructions to token lines, replies to values.

Request encoding
----------------
Every node of an instruction tree contributes its discriminator token
followed by the tokens of its children, depth first::

    Execute(Motion(LINEAR, CartesianPose(x=100)))
    -> execute, motion, linear, transform,   100.00,     0.00, ...

Context-opening variants carry a ``push`` flag token: ``execute,push,...``
and ``dequeue,push`` (a plain dequeue is ``dequeue,once``).

Numeric tokens are right aligned to a minimum width of 8 with a fixed
precision per field family:

===========================  =========
field                        format
===========================  =========
pose components (mm / deg)   ``8.2f``
sleep seconds                ``8.3f``
motion parameters (SI)       ``8.5f``
===========================  =========

:func:`to_wire` joins the tokens with ``,`` into a single line; the
transport adds the line terminator.

Reply decoding
--------------
Replies are one line each: the literal ``OK`` acknowledgement, a scalar
(``True`` / ``False`` / number / text) or a ``{key: value, ...}`` pose
blob in metres and radians.
"""

from __future__ import annotations

import re
from typing import Union

from inovo_control.errors import ProtocolResponseError, ResponseParseError
from inovo_control.geometry.pose import (
    CartesianPose,
    JointPose,
    Pose,
    PoseKind,
    rad_to_deg,
)
from inovo_control.protocol.commands import (
    Custom,
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
    Motion,
    Pop,
    Query,
    QueryData,
    QueryPose,
    RobotCommand,
    SetParameter,
    Sleep,
    Synchronize,
)

OK = "OK"
TOKEN_SEPARATOR = ","

Scalar = Union[bool, int, float, str]

_INT_RE = re.compile(r"[+-]?\d+")
# plain decimal text only: no nan / inf / underscores
_FLOAT_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

_CARTESIAN_KEYS = {
    "x": 1000.0, "y": 1000.0, "z": 1000.0,
    "rx": None, "ry": None, "rz": None,
}
_JOINT_KEYS = ("j1", "j2", "j3", "j4", "j5", "j6")


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def _num(value: float, precision: int) -> str:
    return f"{value:8.{precision}f}"


def encode_command(command: RobotCommand) -> list[str]:
    """Tokens for one robot command."""
    if isinstance(command, Motion):
        return ["motion", command.mode.value, *command.pose.to_wire_tokens()]
    if isinstance(command, SetParameter):
        return ["param", *(_num(v, 5) for v in command.param.si())]
    if isinstance(command, Sleep):
        return ["sleep", _num(command.seconds, 3)]
    if isinstance(command, Synchronize):
        return ["sync"]
    raise TypeError(f"Unknown robot command: {command!r}")


def encode(instruction: Instruction) -> list[str]:
    """Encode *instruction* into its ordered token list.

    Parameters
    ----------
    instruction : Instruction
        Any instruction built from :mod:`inovo_control.protocol.commands`.

    Returns
    -------
    list[str]
        Discriminator and field tokens, depth first.
    """
    if isinstance(instruction, Execute):
        head = ["execute", "push"] if instruction.push else ["execute"]
        return [*head, *encode_command(instruction.command)]
    if isinstance(instruction, Enqueue):
        return ["enqueue", *encode_command(instruction.command)]
    if isinstance(instruction, Dequeue):
        return ["dequeue", "push" if instruction.push else "once"]
    if isinstance(instruction, Pop):
        return ["pop"]
    if isinstance(instruction, Gripper):
        cmd = instruction.command
        if isinstance(cmd, GripperActivate):
            return ["gripper", "activate"]
        if isinstance(cmd, GripperGet):
            return ["gripper", "get"]
        if isinstance(cmd, GripperSet):
            return ["gripper", "set", cmd.label]
        raise TypeError(f"Unknown gripper command: {cmd!r}")
    if isinstance(instruction, Digital):
        head = ["digital", instruction.source.value, str(instruction.port)]
        io = instruction.io
        if isinstance(io, DigitalGet):
            return [*head, "get"]
        if isinstance(io, DigitalSet):
            return [*head, "set", "1" if io.state else "0"]
        raise TypeError(f"Unknown IO type: {io!r}")
    if isinstance(instruction, Query):
        target = instruction.target
        if isinstance(target, QueryPose):
            return ["query", "pose", target.kind.value]
        if isinstance(target, QueryData):
            return ["query", "data", target.key]
        raise TypeError(f"Unknown query target: {target!r}")
    if isinstance(instruction, Custom):
        return ["custom", *instruction.command.tokens]
    raise TypeError(f"Unknown instruction: {instruction!r}")


def to_wire(instruction: Instruction) -> str:
    """Encode *instruction* as one wire line (without terminator)."""
    return TOKEN_SEPARATOR.join(encode(instruction))


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def expect_ok(raw: str) -> None:
    """Raise unless *raw* is the ``OK`` acknowledgement.

    Raises
    ------
    ProtocolResponseError
        For any other reply.
    """
    if raw != OK:
        raise ProtocolResponseError(raw)


def _parse_bool(raw: str) -> bool:
    if raw == "True":
        return True
    if raw == "False":
        return False
    raise ResponseParseError(raw, "expected 'True' or 'False'")


def _parse_float(raw: str) -> float:
    if not _FLOAT_RE.fullmatch(raw.strip()):
        raise ResponseParseError(raw, "expected a number")
    return float(raw)


def decode_scalar(raw: str, expected: type | None = None) -> Scalar:
    """Decode a scalar reply.

    Parameters
    ----------
    raw : str
        Reply text.
    expected : type | None
        ``bool``, ``int``, ``float`` or ``str`` to require that type;
        ``None`` infers it (bool literal, then integer, then float).

    Returns
    -------
    bool | int | float | str

    Raises
    ------
    ResponseParseError
        If *raw* does not parse as the expected (or any) scalar.
    """
    if expected is str:
        return raw
    if expected is bool:
        return _parse_bool(raw)
    if expected is int:
        if not _INT_RE.fullmatch(raw.strip()):
            raise ResponseParseError(raw, "expected an integer")
        return int(raw)
    if expected is float:
        return _parse_float(raw)
    if expected is not None:
        raise TypeError(f"Unsupported scalar type: {expected!r}")

    if raw in ("True", "False"):
        return raw == "True"
    if _INT_RE.fullmatch(raw.strip()):
        return int(raw)
    return _parse_float(raw)


def _parse_blob(raw: str) -> dict[str, str]:
    """Split a ``{key: value, ...}`` blob into raw string pairs."""
    text = raw.strip()
    if not (text.startswith("{") and text.endswith("}")):
        raise ResponseParseError(raw, "expected a '{...}' structure")
    pairs: dict[str, str] = {}
    for item in text[1:-1].split(","):
        item = item.strip()
        if not item:
            continue
        key, sep, value = item.partition(":")
        if not sep:
            raise ResponseParseError(raw, f"malformed pair {item!r}")
        pairs[key.strip().strip("'\"")] = value.strip()
    return pairs


def _known_float(raw: str, key: str, value: str) -> float:
    if not _FLOAT_RE.fullmatch(value):
        raise ResponseParseError(
            raw, f"cannot parse {key}={value!r} as a number",
        )
    return float(value)


def decode_pose(raw: str, kind: PoseKind = PoseKind.CARTESIAN) -> Pose:
    """Decode a pose reply into mm / degrees.

    Cartesian replies carry ``x y z`` in metres and ``rx ry rz`` in
    radians.  Joint replies carry ``j1`` .. ``j6`` in radians, either as a
    key/value blob or as a bare ``[q1, ..., q6]`` list.  Unknown keys are
    ignored and missing keys default to zero.

    Raises
    ------
    ResponseParseError
        On malformed structure or an unparseable known field.
    """
    text = raw.strip()
    if kind is PoseKind.JOINT and text.startswith("["):
        if not text.endswith("]"):
            raise ResponseParseError(raw, "unterminated joint list")
        items = [s for s in (p.strip() for p in text[1:-1].split(",")) if s]
        if len(items) != 6:
            raise ResponseParseError(raw, f"expected 6 joints, got {len(items)}")
        return JointPose.from_values(
            [rad_to_deg(_known_float(raw, f"j{i + 1}", v)) for i, v in enumerate(items)]
        )

    pairs = _parse_blob(raw)

    if kind is PoseKind.CARTESIAN:
        values: dict[str, float] = {}
        for key, scale in _CARTESIAN_KEYS.items():
            if key not in pairs:
                continue
            v = _known_float(raw, key, pairs[key])
            values[key] = v * scale if scale is not None else rad_to_deg(v)
        return CartesianPose(**values)

    joints = {
        key: rad_to_deg(_known_float(raw, key, pairs[key]))
        for key in _JOINT_KEYS
        if key in pairs
    }
    return JointPose(**joints)
