"""Robot client configuration loading and validation."""

from inovo_control.configs.loader import (
    ConfigError,
    ConnectionConfig,
    LoggingConfig,
    RobotConfig,
    load_config,
)

__all__ = [
    "ConfigError",
    "ConnectionConfig",
    "LoggingConfig",
    "RobotConfig",
    "load_config",
]
