"""Configuration loader for the Inovo robot client.

Loads and validates ``robot.yaml`` into typed, frozen dataclasses.
Connection endpoints, timeouts, default motion parameters and logging
come from the config -- nothing is hardcoded in the client.

Motion parameters are stored in user units (percent, mm, degrees);
conversion to SI happens only in the protocol codec.

Usage::

    from inovo_control.configs.loader import load_config
    cfg = load_config()                     # default path
    cfg = load_config("/custom/robot.yaml") # explicit path
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from inovo_control.protocol.motion_param import (
    MAX_ANGLE,
    MAX_LENGTH,
    MAX_PERCENT,
    MIN_ANGLE,
    MIN_LENGTH,
    MIN_PERCENT,
    MotionParam,
)
from inovo_control.utils.fs import load_yaml

logger = logging.getLogger(__name__)

CONNECTION_MODES = ("listen", "connect")
DEFAULT_PORT = 50003


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConnectionConfig:
    """How the client reaches the controller.

    ``mode == "listen"`` binds ``host:port`` and waits for the IVA runtime
    to dial in; ``mode == "connect"`` dials ``host:port`` with bounded
    retries.
    """

    mode: str
    host: str
    port: int
    timeout_s: float
    accept_timeout_s: float | None = None
    connect_attempts: int = 1
    connect_interval_s: float = 1.0


@dataclass(frozen=True)
class LoggingConfig:
    """Settings passed to ``logging.basicConfig`` by entry points."""

    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    @property
    def level_no(self) -> int:
        return logging.getLevelName(self.level)


@dataclass(frozen=True)
class RobotConfig:
    """Top-level client configuration."""

    connection: ConnectionConfig
    default_param: MotionParam = field(default_factory=MotionParam)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


_PARAM_FIELDS = (
    # yaml key, MotionParam field, lo, hi
    ("speed_percent", "speed", MIN_PERCENT, MAX_PERCENT),
    ("accel_percent", "accel", MIN_PERCENT, MAX_PERCENT),
    ("blend_linear_mm", "blend_linear", MIN_LENGTH, MAX_LENGTH),
    ("blend_angular_deg", "blend_angular", MIN_ANGLE, MAX_ANGLE),
    ("tcp_speed_linear_mm_s", "tcp_speed_linear", MIN_LENGTH, MAX_LENGTH),
    ("tcp_speed_angular_deg_s", "tcp_speed_angular", MIN_ANGLE, MAX_ANGLE),
)


def _section(
    data: dict[str, Any], key: str, where: str, *, required: bool = False,
) -> dict[str, Any]:
    """Return ``data[key]`` as a mapping; absent or null gives ``{}``."""
    if key not in data or data[key] is None:
        if required:
            raise KeyError(f"{where}{key}")
        return {}
    value = data[key]
    if not isinstance(value, dict):
        raise ConfigError(
            f"{where}{key} must be a mapping, got {type(value).__name__}"
        )
    return value


def _parse_connection(data: dict[str, Any]) -> ConnectionConfig:
    accept = data.get("accept_timeout_s")
    return ConnectionConfig(
        mode=str(data.get("mode", "listen")).lower(),
        host=str(data["host"]),
        port=int(data.get("port", DEFAULT_PORT)),
        timeout_s=float(data["timeout_s"]),
        accept_timeout_s=None if accept is None else float(accept),
        connect_attempts=int(data.get("connect_attempts", 1)),
        connect_interval_s=float(data.get("connect_interval_s", 1.0)),
    )


def _parse_default_param(data: dict[str, Any] | None) -> MotionParam:
    """Build the default parameters, rejecting out-of-range values.

    ``MotionParam`` itself clamps silently; a config file asking for an
    impossible value is almost certainly a unit mistake, so it fails here.
    """
    if not data:
        return MotionParam()
    kwargs: dict[str, float] = {}
    for key, name, lo, hi in _PARAM_FIELDS:
        if key not in data:
            continue
        value = float(data[key])
        if not lo <= value <= hi:
            raise ConfigError(
                f"motion.default_param.{key} must be in [{lo:g}, {hi:g}], "
                f"got {value:g}"
            )
        kwargs[name] = value
    unknown = set(data) - {key for key, *_ in _PARAM_FIELDS}
    if unknown:
        raise ConfigError(
            f"Unknown motion.default_param key(s): {', '.join(sorted(unknown))}"
        )
    return MotionParam(**kwargs)


def _parse_logging(data: dict[str, Any] | None) -> LoggingConfig:
    if not data:
        return LoggingConfig()
    defaults = LoggingConfig()
    return LoggingConfig(
        level=str(data.get("level", defaults.level)).upper(),
        format=str(data.get("format", defaults.format)),
    )


def _validate_config(cfg: RobotConfig) -> None:
    """Validate field ranges.

    Raises
    ------
    ConfigError
        On any invalid value.
    """
    conn = cfg.connection
    if conn.mode not in CONNECTION_MODES:
        raise ConfigError(
            f"connection.mode must be one of {CONNECTION_MODES}, "
            f"got '{conn.mode}'"
        )
    if not 0 < conn.port < 65536:
        raise ConfigError(f"connection.port out of range: {conn.port}")
    if conn.timeout_s <= 0:
        raise ConfigError(
            f"connection.timeout_s must be positive, got {conn.timeout_s}"
        )
    if conn.accept_timeout_s is not None and conn.accept_timeout_s <= 0:
        raise ConfigError(
            f"connection.accept_timeout_s must be positive or null, "
            f"got {conn.accept_timeout_s}"
        )
    if conn.connect_attempts < 1:
        raise ConfigError(
            f"connection.connect_attempts must be >= 1, "
            f"got {conn.connect_attempts}"
        )
    if conn.connect_interval_s < 0:
        raise ConfigError(
            f"connection.connect_interval_s must be >= 0, "
            f"got {conn.connect_interval_s}"
        )
    if not isinstance(cfg.logging.level_no, int):
        raise ConfigError(f"Unknown logging.level '{cfg.logging.level}'")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(path: str | Path | None = None) -> RobotConfig:
    """Load and validate robot client configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``robot.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    RobotConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If any field is missing or fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    if path is None:
        path = Path(__file__).parent / "robot.yaml"
    else:
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading configuration from %s", path)

    try:
        data: dict[str, Any] = load_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML: {exc}") from exc
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping: {path}")

    try:
        # -- connection -----------------------------------------------------
        connection = _parse_connection(
            _section(data, "connection", "", required=True)
        )

        # -- motion ---------------------------------------------------------
        motion = _section(data, "motion", "")
        default_param = _parse_default_param(
            _section(motion, "default_param", "motion.")
        )

        # -- logging --------------------------------------------------------
        log_cfg = _parse_logging(_section(data, "logging", ""))

        config = RobotConfig(
            connection=connection,
            default_param=default_param,
            logging=log_cfg,
        )

        _validate_config(config)
        logger.info("Configuration loaded successfully")
        return config

    except KeyError as exc:
        raise ConfigError(
            f"Missing required configuration key: {exc}"
        ) from exc
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"Invalid configuration value: {exc}"
        ) from exc
