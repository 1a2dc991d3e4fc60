"""hrviews configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site, not in this module)
  2. Environment variables  (HRVIEWS_DB, HRVIEWS_WRITE_POLICY, HRVIEWS_LOG_LEVEL)
  3. Per-project hrviews.yaml
  4. Global ~/.hrviews/config.yaml
  5. Hardcoded defaults

All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from hrviews.materializer import WritePolicy

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_PATH: Path = Path.home() / ".hrviews" / "config.yaml"
_PROJECT_CONFIG_NAME: str = "hrviews.yaml"

_KNOWN_SECTIONS: frozenset[str] = frozenset(["store", "materialization", "logging"])
_LOG_LEVELS: frozenset[str] = frozenset(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class StoreCfg:
    """Document store location (hrviews.yaml: store:)."""

    path: str = ".hrviews.db"


@dataclass
class MaterializationCfg:
    """View build behaviour (hrviews.yaml: materialization:).

    Attributes:
        on_write_failure: ``abort`` raises when any view write fails;
            ``commit`` keeps the successful writes and only reports failures.
    """

    on_write_failure: WritePolicy = WritePolicy.ABORT


@dataclass
class LoggingCfg:
    """Diagnostic output (hrviews.yaml: logging:)."""

    level: str = "WARNING"


@dataclass
class HRViewsConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    store: StoreCfg = field(default_factory=StoreCfg)
    materialization: MaterializationCfg = field(default_factory=MaterializationCfg)
    logging: LoggingCfg = field(default_factory=LoggingCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _parse_policy(value: Any) -> WritePolicy:
    try:
        return WritePolicy(str(value).lower())
    except ValueError:
        allowed = ", ".join(p.value for p in WritePolicy)
        raise ConfigError(
            f"materialization.on_write_failure must be one of: {allowed} (got '{value}')"
        ) from None


def _parse_level(value: Any) -> str:
    level = str(value).upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(
            f"logging.level must be one of: {', '.join(sorted(_LOG_LEVELS))} (got '{value}')"
        )
    return level


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _read_yaml(path: Path) -> dict[str, Any]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file '{path}' must contain a mapping at the top level.")
    return raw


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> HRViewsConfig:
    """Build a *HRViewsConfig* from a merged raw YAML dict."""
    cfg = HRViewsConfig()

    if "store" in data:
        s = data["store"] or {}
        cfg.store = StoreCfg(path=str(s.get("path", cfg.store.path)))

    if "materialization" in data:
        m = data["materialization"] or {}
        cfg.materialization = MaterializationCfg(
            on_write_failure=_parse_policy(
                m.get("on_write_failure", cfg.materialization.on_write_failure.value)
            ),
        )

    if "logging" in data:
        lg = data["logging"] or {}
        cfg.logging = LoggingCfg(level=_parse_level(lg.get("level", cfg.logging.level)))

    return cfg


def _apply_env_overrides(cfg: HRViewsConfig) -> HRViewsConfig:
    """Apply HRVIEWS_* environment variable overrides."""
    if path := os.environ.get("HRVIEWS_DB"):
        cfg.store.path = path
    if policy := os.environ.get("HRVIEWS_WRITE_POLICY"):
        cfg.materialization.on_write_failure = _parse_policy(policy)
    if level := os.environ.get("HRVIEWS_LOG_LEVEL"):
        cfg.logging.level = _parse_level(level)
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> HRViewsConfig:
    """Load and return a merged *HRViewsConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *hrviews.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Raises:
        ConfigError: If a config file is not a mapping, or a policy or log
            level value is not recognised.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    if global_path.exists():
        raw_global = _read_yaml(global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = _read_yaml(project_cfg_path)
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)
    return _apply_env_overrides(cfg)
