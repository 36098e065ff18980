"""Filesystem helpers for read-only configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_yaml(path: str | Path) -> Any:
    """Parse *path* with ``yaml.safe_load``.

    Returns ``None`` for an empty file.  Raises ``FileNotFoundError`` for a
    missing file and ``yaml.YAMLError`` (message prefixed with the path)
    for malformed YAML; callers translate the latter into their own error
    type.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"YAML file not found: {path}")
    text = path.read_text(encoding="utf-8")
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise yaml.YAMLError(f"{path}: {exc}") from exc
