"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``   committed static defaults
  2. ``config/local.toml``     optional local overrides (gitignored)
  3. ``.env``                  local env overrides (gitignored)
  4. Environment variables     ``TURNIP_FORECASTER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The forecasting engine itself takes no configuration: price windows, the
transition matrix and input limits are game rules, not tunables.  Config only
shapes the ambient concerns around it (logging, terminal reports).
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class ReportConfig(BaseModel):
    """Terminal report settings.

    Attributes:
        currency_label:       Unit appended to prices in report headers.
        probability_decimals: Decimal places for pattern percentages.
        show_observed:        Include the observed-price column in tables.
    """

    model_config = ConfigDict(frozen=True)

    currency_label: str = "bells"
    probability_decimals: int = 2
    show_observed: bool = True

    @field_validator("probability_decimals")
    @classmethod
    def validate_decimals(cls, v: int) -> int:
        if not 0 <= v <= 6:
            raise ValueError(f"probability_decimals must be in [0, 6], got {v}.")
        return v


class AppConfig(BaseModel):
    """Complete application configuration, the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    logging: LoggingConfig = LoggingConfig()
    report: ReportConfig = ReportConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``; when that default file is
            absent (e.g. an installed wheel) built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    raw: dict[str, Any] = {}
    if config_path is None:
        config_path = root / "config" / "default.toml"
        if config_path.exists():
            raw = _read_toml(config_path)
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                "Pass an existing TOML file or omit --config to use defaults."
            )
        raw = _read_toml(config_path)

    # Also merge local.toml if present (gitignored local overrides)
    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        raw = _deep_merge(raw, _read_toml(local_config_path))

    # 3. Apply TURNIP_FORECASTER_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply TURNIP_FORECASTER_* env vars to the raw config dict.

    Supported overrides:
      TURNIP_FORECASTER_LOG_LEVEL  → raw["logging"]["level"]
      TURNIP_FORECASTER_LOG_FILE   → raw["logging"]["log_file"]
      TURNIP_FORECASTER_DEBUG      → raw["debug"]
    """
    if log_level := os.environ.get("TURNIP_FORECASTER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if log_file := os.environ.get("TURNIP_FORECASTER_LOG_FILE"):
        raw.setdefault("logging", {})["log_file"] = log_file

    if debug := os.environ.get("TURNIP_FORECASTER_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    return AppConfig(
        logging=LoggingConfig(**raw.get("logging", {})),
        report=ReportConfig(**raw.get("report", {})),
        debug=raw.get("debug", False),
    )
