from __future__ import annotations

import json
from pathlib import Path

import pytest

from duoload.config import ConfigLocator, ConfigRepository, TransferConfig


def test_locator_prefers_explicit_home_then_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DUOLOAD_HOME", str(tmp_path / "env"))

    assert ConfigLocator().home == (tmp_path / "env").resolve()
    assert ConfigLocator(home=tmp_path / "explicit").home == (tmp_path / "explicit").resolve()
    assert ConfigLocator().config_path().name == "config.yaml"


def test_missing_file_yields_defaults_without_writing(config_repository: ConfigRepository) -> None:
    config = config_repository.load()

    assert config == TransferConfig()
    assert not config_repository.path.exists()


def test_save_then_load_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "duoload.yaml"
    ConfigRepository(path=path).save(TransferConfig(polite_delay=3.0, page_size=50))

    loaded = ConfigRepository(path=path).load()

    assert loaded.polite_delay == 3.0
    assert loaded.page_size == 50
    assert "polite_delay: 3.0" in path.read_text(encoding="utf-8")


def test_json_config_is_supported(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"retry": {"max_retries": 5}}), encoding="utf-8")

    assert ConfigRepository(path=path).load().retry.max_retries == 5


def test_non_mapping_file_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        ConfigRepository(path=path).load()


def test_unknown_extension_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("x = 1\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported"):
        ConfigRepository(path=path).load()
