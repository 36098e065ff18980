"""Tests for pose types and their algebra."""

from __future__ import annotations

import math

import numpy as np
import pytest

from inovo_control.geometry.pose import (
    CartesianPose,
    JointPose,
    PoseKind,
    deg_to_rad,
    rad_to_deg,
)


def _assert_pose_close(a, b, tol: float = 1e-6) -> None:
    np.testing.assert_allclose(a.values(), b.values(), atol=tol)


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------


class TestUnits:
    def test_deg_rad(self) -> None:
        assert deg_to_rad(180.0) == pytest.approx(math.pi)
        assert rad_to_deg(math.pi / 2) == pytest.approx(90.0)


# ---------------------------------------------------------------------------
# Cartesian
# ---------------------------------------------------------------------------


class TestCartesianPose:
    def test_kind(self) -> None:
        assert CartesianPose().kind is PoseKind.CARTESIAN

    def test_constructors(self) -> None:
        assert CartesianPose.from_vector(1, 2, 3).values() == (1, 2, 3, 0.0, 0.0, 0.0)
        assert CartesianPose.from_euler(10, 20, 30).euler == (10, 20, 30)
        assert CartesianPose(1, 2, 3, 4, 5, 6).vector_only() == CartesianPose(1, 2, 3)

    def test_translation_negate(self) -> None:
        _assert_pose_close(
            CartesianPose(z=50.0).negate(), CartesianPose(z=-50.0),
        )

    def test_negate_then_compose_is_identity(self) -> None:
        p = CartesianPose(100.0, -20.0, 35.0, 10.0, -25.0, 60.0)
        _assert_pose_close(p.compose(p.negate()), CartesianPose.identity())
        _assert_pose_close(p.negate().compose(p), CartesianPose.identity())

    def test_compose_rotates_translation(self) -> None:
        turn = CartesianPose.from_euler(0.0, 0.0, 90.0)
        step = CartesianPose.from_vector(10.0, 0.0, 0.0)
        _assert_pose_close(turn * step, CartesianPose(0.0, 10.0, 0.0, 0.0, 0.0, 90.0))

    def test_then_is_reversed_compose(self) -> None:
        a = CartesianPose(1.0, 2.0, 3.0, 0.0, 0.0, 45.0)
        b = CartesianPose(5.0, 0.0, 0.0, 30.0, 0.0, 0.0)
        _assert_pose_close(a.then(b), b.compose(a))

    def test_interpolate_endpoints_and_midpoint(self) -> None:
        a = CartesianPose.identity()
        b = CartesianPose(100.0, 0.0, 0.0, 0.0, 0.0, 90.0)
        _assert_pose_close(a.interpolate(b, 0.0), a)
        _assert_pose_close(a.interpolate(b, 1.0), b)
        _assert_pose_close(a.interpolate(b, 0.5), CartesianPose(50.0, 0.0, 0.0, 0.0, 0.0, 45.0))

    def test_mixed_kinds_rejected(self) -> None:
        with pytest.raises(TypeError):
            CartesianPose().compose(JointPose())

    def test_wire_tokens(self) -> None:
        assert CartesianPose(x=100.0, rz=-12.5).to_wire_tokens() == [
            "transform", "  100.00", "    0.00", "    0.00",
            "    0.00", "    0.00", "  -12.50",
        ]

    def test_wire_tokens_no_negative_zero(self) -> None:
        tokens = CartesianPose(z=50.0).negate().to_wire_tokens()
        assert tokens[1] == "    0.00"
        assert tokens[3] == "  -50.00"
        assert "-0.00" not in " ".join(tokens)


# ---------------------------------------------------------------------------
# Joint
# ---------------------------------------------------------------------------


class TestJointPose:
    def test_from_values_requires_six(self) -> None:
        with pytest.raises(ValueError, match="6 values"):
            JointPose.from_values([1.0, 2.0])

    def test_negate_and_compose(self) -> None:
        q = JointPose(10, -20, 30, -40, 50, -60)
        assert q.negate() == JointPose(-10, 20, -30, 40, -50, 60)
        assert q.compose(q.negate()) == JointPose.identity()
        assert -q == q.negate()

    def test_add_sub(self) -> None:
        a = JointPose(1, 2, 3, 4, 5, 6)
        b = JointPose(1, 1, 1, 1, 1, 1)
        assert a + b == JointPose(2, 3, 4, 5, 6, 7)
        assert a - b == JointPose(0, 1, 2, 3, 4, 5)

    def test_interpolate(self) -> None:
        a = JointPose.identity()
        b = JointPose(10, 20, 30, 40, 50, 60)
        assert a.interpolate(b, 0.5) == JointPose(5, 10, 15, 20, 25, 30)

    def test_wire_tokens(self) -> None:
        assert JointPose(1.5, 0, 0, 0, 0, -90).to_wire_tokens() == [
            "joint", "    1.50", "    0.00", "    0.00",
            "    0.00", "    0.00", "  -90.00",
        ]
