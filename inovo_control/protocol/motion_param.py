"""Motion parameters -- speed, acceleration, blending and TCP limits.

Fields are stored in user units (percent, mm, degrees) and are **always**
clamped into their valid range, by the constructor and by every
``set_*`` builder (NaN becomes the minimum, infinities the nearest
bound).  The controller wants SI values; :meth:`MotionParam.si`
performs that conversion for the codec.

Ranges
------
==================  ==========  ===========
field               unit        range
==================  ==========  ===========
speed, accel        percent     [1, 100]
blend_linear        mm          [1, 1000]
blend_angular       deg         [1, 720]
tcp_speed_linear    mm/s        [1, 1000]
tcp_speed_angular   deg/s       [1, 720]
==================  ==========  ===========
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from inovo_control.geometry.pose import deg_to_rad

MIN_PERCENT = 1.0
MAX_PERCENT = 100.0
MIN_LENGTH = 1.0
MAX_LENGTH = 1000.0
MIN_ANGLE = 1.0
MAX_ANGLE = 720.0


def _clamp(value: float, lo: float, hi: float) -> float:
    value = float(value)
    if math.isnan(value):
        return lo
    return min(max(value, lo), hi)


@dataclass(frozen=True, slots=True)
class MotionParam:
    """Robot motion parameters.

    Parameters
    ----------
    speed : float
        Joint speed, percent of maximum.
    accel : float
        Joint acceleration, percent of maximum.
    blend_linear : float
        Linear blend radius in mm.
    blend_angular : float
        Angular blend in degrees.
    tcp_speed_linear : float
        TCP linear speed limit in mm/s.
    tcp_speed_angular : float
        TCP angular speed limit in deg/s.

    Examples
    --------
    >>> slow = MotionParam().set_speed(10.0).set_accel(10.0)
    >>> MotionParam(speed=0.0).speed
    1.0
    """

    speed: float = 50.0
    accel: float = 50.0
    blend_linear: float = MIN_LENGTH
    blend_angular: float = MIN_ANGLE
    tcp_speed_linear: float = 250.0
    tcp_speed_angular: float = 90.0

    def __post_init__(self) -> None:
        for name, lo, hi in (
            ("speed", MIN_PERCENT, MAX_PERCENT),
            ("accel", MIN_PERCENT, MAX_PERCENT),
            ("blend_linear", MIN_LENGTH, MAX_LENGTH),
            ("blend_angular", MIN_ANGLE, MAX_ANGLE),
            ("tcp_speed_linear", MIN_LENGTH, MAX_LENGTH),
            ("tcp_speed_angular", MIN_ANGLE, MAX_ANGLE),
        ):
            object.__setattr__(self, name, _clamp(getattr(self, name), lo, hi))

    # -- builders (each returns a new, clamped value) ----------------------

    def set_speed(self, percent: float) -> MotionParam:
        return replace(self, speed=percent)

    def set_accel(self, percent: float) -> MotionParam:
        return replace(self, accel=percent)

    def set_blend_linear(self, mm: float) -> MotionParam:
        return replace(self, blend_linear=mm)

    def set_blend_angular(self, deg: float) -> MotionParam:
        return replace(self, blend_angular=deg)

    def set_tcp_speed_linear(self, mm_s: float) -> MotionParam:
        return replace(self, tcp_speed_linear=mm_s)

    def set_tcp_speed_angular(self, deg_s: float) -> MotionParam:
        return replace(self, tcp_speed_angular=deg_s)

    # -- wire units ---------------------------------------------------------

    def si(self) -> tuple[float, float, float, float, float, float]:
        """Values in controller units.

        Returns
        -------
        tuple
            ``(speed, accel)`` as fractions, blend in m and rad, TCP
            limits in m/s and rad/s.
        """
        return (
            self.speed / 100.0,
            self.accel / 100.0,
            self.blend_linear / 1000.0,
            deg_to_rad(self.blend_angular),
            self.tcp_speed_linear / 1000.0,
            deg_to_rad(self.tcp_speed_angular),
        )
