"""Tests for configuration loading."""

from pathlib import Path

import pytest

from finddupfiles.config import FindDupFilesConfig, get_config
from finddupfiles.services.exceptions import ConfigError


def test_defaults_from_env_home(config_home: Path):
    config = get_config()

    assert config.home == config_home
    assert config_home.is_dir()
    assert config.database_path == config_home / "finddupfiles.db"
    assert config.log_path == config_home / "finddupfiles.log"
    assert config.hash_algorithm == "md5"
    assert config.include_empty_files is False


def test_env_overrides(config_home: Path, monkeypatch):
    monkeypatch.setenv("FINDDUPFILES_HASH_ALGORITHM", "sha256")
    monkeypatch.setenv("FINDDUPFILES_HASH_WORKERS", "8")
    monkeypatch.setenv("FINDDUPFILES_INCLUDE_EMPTY_FILES", "true")

    config = FindDupFilesConfig()

    assert config.hash_algorithm == "sha256"
    assert config.hash_workers == 8
    assert config.include_empty_files is True


def test_home_that_cannot_be_created(tmp_path: Path, monkeypatch):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    monkeypatch.setenv("FINDDUPFILES_HOME", str(blocker / "home"))

    with pytest.raises(ConfigError, match="cannot create"):
        get_config()


def test_home_that_is_a_file(tmp_path: Path, monkeypatch):
    home = tmp_path / "home"
    home.write_text("")
    monkeypatch.setenv("FINDDUPFILES_HOME", str(home))

    with pytest.raises(ConfigError, match="is not a directory"):
        get_config()


def test_invalid_setting(config_home: Path, monkeypatch):
    monkeypatch.setenv("FINDDUPFILES_HASH_WORKERS", "0")

    with pytest.raises(ConfigError, match="hash_workers"):
        get_config()
