"""Configuration management utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..schemas.config import AppConfig, load_config


class ConfigManager:
    """YAML-backed loader for named client profiles."""

    def __init__(self, base_path: str | Path):
        self._base_path = Path(base_path)

    def load(self, name: str) -> AppConfig:
        """Load a YAML profile by name without file extension."""
        return load_config_file(self._base_path / f"{name}.yaml")


def load_config_file(path: Path) -> AppConfig:
    """Read and validate a YAML configuration file; empty files yield defaults."""
    with path.open("r", encoding="utf-8") as handle:
        loaded: Any = yaml.safe_load(handle)
    return load_config(loaded if loaded is not None else {})


__all__ = ["ConfigManager", "load_config_file"]
