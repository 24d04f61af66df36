"""Configuration loading helpers for duoload."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from .models import TransferConfig

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
CONFIG_FILENAME = "config.yaml"


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


def _write_file(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix == ".json":
            json.dump(payload, stream, indent=2, ensure_ascii=False)
        else:
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)


@dataclass(slots=True)
class ConfigLocator:
    """Resolve the duoload home directory and the files inside it."""

    home: Path | None = None

    def __post_init__(self) -> None:
        env_home = os.environ.get("DUOLOAD_HOME")
        if self.home is not None:
            root = Path(self.home)
        elif env_home:
            root = Path(env_home)
        else:
            root = Path.home() / ".duoload"
        self.home = root.expanduser().resolve()

    def config_path(self) -> Path:
        return self.home / CONFIG_FILENAME


class ConfigRepository:
    """Load and persist :class:`TransferConfig` files."""

    def __init__(self, locator: ConfigLocator | None = None, path: Path | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self.path = path or self.locator.config_path()
        self._cache: TransferConfig | None = None

    def load(self) -> TransferConfig:
        if self._cache is not None:
            return self._cache
        if self.path.exists():
            if self.path.suffix not in CONFIG_EXTENSIONS:
                raise ValueError(f"Unsupported configuration format: {self.path.suffix}")
            config = TransferConfig.model_validate(_read_file(self.path))
        else:
            config = TransferConfig()
        self._cache = config
        return config

    def save(self, config: TransferConfig) -> Path:
        _write_file(self.path, config.model_dump(mode="json"))
        self._cache = config
        return self.path


__all__ = ["CONFIG_EXTENSIONS", "CONFIG_FILENAME", "ConfigLocator", "ConfigRepository"]
