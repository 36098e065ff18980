"""Tests for configuration loading and validation."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from inovo_control.configs.loader import (
    ConfigError,
    ConnectionConfig,
    RobotConfig,
    load_config,
)
from inovo_control.protocol.motion_param import MotionParam

MINIMAL = """
connection:
  host: 127.0.0.1
  timeout_s: 5
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "robot.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaultConfig:
    def test_shipped_config_loads(self) -> None:
        cfg = load_config()
        assert isinstance(cfg, RobotConfig)
        assert cfg.connection.mode == "listen"
        assert cfg.connection.port == 50003
        assert cfg.default_param == MotionParam()
        assert cfg.logging.level_no == logging.INFO

    def test_frozen(self) -> None:
        cfg = load_config()
        with pytest.raises(AttributeError):
            cfg.connection = None  # type: ignore[misc]


class TestLoad:
    def test_minimal_uses_defaults(self, tmp_path: Path) -> None:
        cfg = load_config(_write(tmp_path, MINIMAL))
        assert cfg.connection == ConnectionConfig(
            mode="listen", host="127.0.0.1", port=50003, timeout_s=5.0,
        )
        assert cfg.default_param == MotionParam()
        assert cfg.logging.level == "INFO"

    def test_full(self, tmp_path: Path) -> None:
        cfg = load_config(_write(tmp_path, """
connection:
  mode: Connect
  host: 10.0.0.2
  port: 6000
  timeout_s: 2.5
  accept_timeout_s: null
  connect_attempts: 4
  connect_interval_s: 0.25
motion:
  default_param:
    speed_percent: 20
    blend_linear_mm: 5
logging:
  level: debug
  format: "%(message)s"
"""))
        assert cfg.connection.mode == "connect"
        assert cfg.connection.connect_attempts == 4
        assert cfg.connection.accept_timeout_s is None
        assert cfg.default_param == MotionParam(speed=20.0, blend_linear=5.0)
        assert cfg.logging.level_no == logging.DEBUG
        assert cfg.logging.format == "%(message)s"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Empty"):
            load_config(_write(tmp_path, ""))


class TestValidation:
    @pytest.mark.parametrize(
        "text, match",
        [
            ("logging: {level: INFO}\n", "Missing required"),
            ("connection: {host: h}\n", "Missing required"),
            ("connection: {host: h, timeout_s: abc}\n", "Invalid configuration value"),
            ("connection: {host: h, timeout_s: 1, mode: serial}\n", "connection.mode"),
            ("connection: {host: h, timeout_s: 1, port: 70000}\n", "port"),
            ("connection: {host: h, timeout_s: 0}\n", "timeout_s"),
            ("connection: {host: h, timeout_s: 1, connect_attempts: 0}\n", "connect_attempts"),
            ("connection: {host: h, timeout_s: 1, connect_interval_s: -1}\n", "connect_interval_s"),
            ("connection: {host: h, timeout_s: 1, accept_timeout_s: 0}\n", "accept_timeout_s"),
        ],
    )
    def test_connection_errors(self, tmp_path: Path, text: str, match: str) -> None:
        with pytest.raises(ConfigError, match=match):
            load_config(_write(tmp_path, text))

    def test_param_out_of_range(self, tmp_path: Path) -> None:
        text = MINIMAL + "motion:\n  default_param:\n    speed_percent: 0\n"
        with pytest.raises(ConfigError, match="speed_percent"):
            load_config(_write(tmp_path, text))

    def test_param_unknown_key(self, tmp_path: Path) -> None:
        text = MINIMAL + "motion:\n  default_param:\n    speed: 10\n"
        with pytest.raises(ConfigError, match="Unknown motion.default_param"):
            load_config(_write(tmp_path, text))

    def test_unknown_log_level(self, tmp_path: Path) -> None:
        text = MINIMAL + "logging:\n  level: LOUD\n"
        with pytest.raises(ConfigError, match="logging.level"):
            load_config(_write(tmp_path, text))

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="mapping"):
            load_config(_write(tmp_path, "- a\n- b\n"))

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Malformed YAML") as info:
            load_config(_write(tmp_path, "connection: [\n  host: h\n"))
        assert str(tmp_path) in str(info.value)

    @pytest.mark.parametrize(
        "section, match",
        [
            ("motion: [1, 2]\n", "motion must be a mapping, got list"),
            ("motion: 5\n", "motion must be a mapping, got int"),
            ("motion:\n  default_param: fast\n", "motion.default_param must be a mapping"),
            ("logging: DEBUG\n", "logging must be a mapping, got str"),
        ],
    )
    def test_non_mapping_sections(self, tmp_path: Path, section: str, match: str) -> None:
        with pytest.raises(ConfigError, match=match):
            load_config(_write(tmp_path, MINIMAL + section))

    def test_non_mapping_connection(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="connection must be a mapping"):
            load_config(_write(tmp_path, "connection: 127.0.0.1\n"))

    def test_null_sections_use_defaults(self, tmp_path: Path) -> None:
        cfg = load_config(_write(tmp_path, MINIMAL + "motion:\nlogging:\n"))
        assert cfg.default_param == MotionParam()
        assert cfg.logging.level == "INFO"
