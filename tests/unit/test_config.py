"""Tests for the hrviews config loader."""

from __future__ import annotations

import warnings
from pathlib import Path

import pytest
import yaml

from hrviews.config import ConfigError, HRViewsConfig, load_config
from hrviews.materializer import WritePolicy


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_yaml(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data), encoding="utf-8")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("HRVIEWS_DB", "HRVIEWS_WRITE_POLICY", "HRVIEWS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def _load(tmp_path: Path, global_path: Path | None = None) -> HRViewsConfig:
    return load_config(
        project_dir=tmp_path,
        global_config_path=global_path or tmp_path / "nonexistent" / "config.yaml",
    )


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


def test_load_config_defaults_no_files(tmp_path: Path) -> None:
    cfg = _load(tmp_path)
    assert cfg.store.path == ".hrviews.db"
    assert cfg.materialization.on_write_failure is WritePolicy.ABORT
    assert cfg.logging.level == "WARNING"


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------


def test_global_config_applied(tmp_path: Path) -> None:
    global_path = tmp_path / "home" / "config.yaml"
    _write_yaml(global_path, {"store": {"path": "/data/hr.db"}})
    cfg = _load(tmp_path, global_path)
    assert cfg.store.path == "/data/hr.db"


def test_project_config_overrides_global(tmp_path: Path) -> None:
    global_path = tmp_path / "home" / "config.yaml"
    _write_yaml(global_path, {"store": {"path": "/data/hr.db"}, "logging": {"level": "debug"}})
    _write_yaml(tmp_path / "hrviews.yaml", {"store": {"path": "local.db"}})
    cfg = _load(tmp_path, global_path)
    assert cfg.store.path == "local.db"
    assert cfg.logging.level == "DEBUG"


def test_project_policy(tmp_path: Path) -> None:
    _write_yaml(tmp_path / "hrviews.yaml", {"materialization": {"on_write_failure": "commit"}})
    assert _load(tmp_path).materialization.on_write_failure is WritePolicy.COMMIT


def test_env_overrides_files(tmp_path: Path, monkeypatch) -> None:
    _write_yaml(tmp_path / "hrviews.yaml", {"store": {"path": "local.db"}})
    monkeypatch.setenv("HRVIEWS_DB", "env.db")
    monkeypatch.setenv("HRVIEWS_WRITE_POLICY", "COMMIT")
    monkeypatch.setenv("HRVIEWS_LOG_LEVEL", "info")
    cfg = _load(tmp_path)
    assert cfg.store.path == "env.db"
    assert cfg.materialization.on_write_failure is WritePolicy.COMMIT
    assert cfg.logging.level == "INFO"


def test_empty_section_keeps_defaults(tmp_path: Path) -> None:
    (tmp_path / "hrviews.yaml").write_text("store:\n", encoding="utf-8")
    assert _load(tmp_path).store.path == ".hrviews.db"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def test_invalid_policy_raises(tmp_path: Path) -> None:
    _write_yaml(tmp_path / "hrviews.yaml", {"materialization": {"on_write_failure": "retry"}})
    with pytest.raises(ConfigError, match="on_write_failure"):
        _load(tmp_path)


def test_invalid_env_policy_raises(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HRVIEWS_WRITE_POLICY", "sometimes")
    with pytest.raises(ConfigError):
        _load(tmp_path)


def test_invalid_log_level_raises(tmp_path: Path) -> None:
    _write_yaml(tmp_path / "hrviews.yaml", {"logging": {"level": "LOUD"}})
    with pytest.raises(ConfigError, match="logging.level"):
        _load(tmp_path)


def test_non_mapping_file_raises(tmp_path: Path) -> None:
    (tmp_path / "hrviews.yaml").write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        _load(tmp_path)


def test_unknown_key_warns(tmp_path: Path) -> None:
    _write_yaml(tmp_path / "hrviews.yaml", {"views": {"dedupe": True}})
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        _load(tmp_path)
    assert any("views" in str(w.message) for w in caught)
