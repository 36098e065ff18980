#!/usr/bin/env python3
"""Verify connectivity with the IVA controller.

Opens the configured transport and runs a few harmless queries (no
motion) to confirm the runtime answers and replies decode.

Usage::

    python -m inovo_control.scripts.probe_connection
    python -m inovo_control.scripts.probe_connection --config /path/to/robot.yaml
    python -m inovo_control.scripts.probe_connection --mode connect --host 192.168.1.7
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from inovo_control.configs.loader import ConfigError, load_config
from inovo_control.errors import RobotError
from inovo_control.hardware.robot import Robot

logger = logging.getLogger(__name__)


def probe_connection(
    config_path: str | None = None,
    mode: str | None = None,
    host: str | None = None,
    port: int | None = None,
) -> bool:
    """Run connection checks.  Returns ``True`` if all pass."""
    print("=" * 60)
    print("  INOVO CONNECTION PROBE")
    print("=" * 60)

    try:
        config = load_config(config_path)
    except (ConfigError, FileNotFoundError) as exc:
        print(f"[FAIL] Configuration: {exc}")
        return False

    overrides = {
        k: v for k, v in (("mode", mode), ("host", host), ("port", port))
        if v is not None
    }
    if overrides:
        config = dataclasses.replace(
            config,
            connection=dataclasses.replace(config.connection, **overrides),
        )

    logging.basicConfig(
        level=config.logging.level_no,
        format=config.logging.format,
    )

    conn = config.connection
    print("\n[OK] Configuration loaded")
    print(f"     Mode: {conn.mode}  Endpoint: {conn.host}:{conn.port}")

    passed = 0
    failed = 0

    # --- Check 1: transport ------------------------------------------------
    try:
        robot = Robot.from_config(config)
        print("[PASS] Transport established")
        passed += 1
    except RobotError as exc:
        print(f"[FAIL] Transport: {exc}")
        return False

    with robot:
        # --- Check 2: cartesian pose ---------------------------------------
        try:
            pose = robot.current_transform()
            print(f"[PASS] Transform query: "
                  f"X={pose.x:.2f} Y={pose.y:.2f} Z={pose.z:.2f} "
                  f"RX={pose.rx:.2f} RY={pose.ry:.2f} RZ={pose.rz:.2f}")
            passed += 1
        except RobotError as exc:
            print(f"[FAIL] Transform query: {exc}")
            failed += 1

        # --- Check 3: joint pose -------------------------------------------
        try:
            joints = robot.current_joint()
            print("[PASS] Joint query: "
                  + " ".join(f"{v:.2f}" for v in joints.values()))
            passed += 1
        except RobotError as exc:
            print(f"[FAIL] Joint query: {exc}")
            failed += 1

        # --- Check 4: parameters -------------------------------------------
        try:
            robot.set_param(config.default_param)
            print("[PASS] Default motion parameters applied")
            passed += 1
        except RobotError as exc:
            print(f"[FAIL] Parameters: {exc}")
            failed += 1

    print(f"\n{'='*60}")
    print(f"  Results: {passed} passed, {failed} failed")
    print(f"{'='*60}")
    return failed == 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Probe the IVA controller")
    parser.add_argument("--config", "-c", type=str, help="Config file path")
    parser.add_argument(
        "--mode", choices=("listen", "connect"), help="Connection mode override",
    )
    parser.add_argument("--host", type=str, help="Host override")
    parser.add_argument("--port", "-p", type=int, help="Port override")
    args = parser.parse_args()

    success = probe_connection(args.config, args.mode, args.host, args.port)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
