from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_SECTION_KEYS: set[str] = {
    "server",
    "http",
    "logging",
    "cache",
    "jackett",
    "omdb",
    "realdebrid",
    "anilist",
    "ranking",
}

# Flat key (ENV/CLI) -> (section, key inside section)
_FLAT_KEYS: dict[str, tuple[str, str]] = {
    "host": ("server", "host"),
    "port": ("server", "port"),
    "public_base_url": ("server", "public_base_url"),
    "public_dir": ("server", "public_dir"),
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_follow_redirects": ("http", "follow_redirects"),
    "http_user_agent": ("http", "user_agent"),
    "http_retry_max_attempts": ("http", "retry_max_attempts"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "log_file_dir": ("logging", "file_dir"),
    "cache_max_entries": ("cache", "max_entries"),
    "resolved_link_ttl_seconds": ("cache", "resolved_link_ttl_seconds"),
    "jackett_url": ("jackett", "url"),
    "jackett_api_key": ("jackett", "api_key"),
    "omdb_url": ("omdb", "url"),
    "omdb_api_key": ("omdb", "api_key"),
    "real_debrid_api_key": ("realdebrid", "api_key"),
}

_DEFAULT_LOG_DIR = "./logs"


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *override* into *base* in place; nested mappings merge, the rest replaces."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, Mapping):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _normalize_layer(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Bring one layer (defaults/YAML/ENV/CLI) into the sectioned shape.

    Sectioned blocks pass through; flat keys such as ``jackett_api_key`` are
    moved into their section. ``log_to_file: true`` enables file logging in
    ``./logs`` unless the layer names a directory itself.
    """
    out: dict[str, Any] = {}

    for section in _SECTION_KEYS:
        if section in data and isinstance(data[section], Mapping):
            out[section] = dict(data[section])

    for key in ("app_name", "environment"):
        if key in data:
            out[key] = data[key]

    for flat_key, (section, section_key) in _FLAT_KEYS.items():
        if flat_key in data:
            out.setdefault(section, {})
            out[section][section_key] = data[flat_key]

    if data.get("log_to_file") and "log_file_dir" not in data:
        out.setdefault("logging", {}).setdefault("file_dir", _DEFAULT_LOG_DIR)

    return out


def _read_yaml_config(config_path: Path) -> dict[str, Any]:
    parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Load configuration with strict precedence:
    defaults < YAML file < env vars < cli overrides

    No files or directories are created here.
    """
    cli_overrides = cli_overrides or {}

    # .env participates as part of the env layer.
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    base = _normalize_layer(deepcopy(DEFAULT_CONFIG))

    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(config_path)
        _deep_merge(base, _normalize_layer(_read_yaml_config(config_path)))

    _deep_merge(base, _normalize_layer(EnvOverrides().to_update_dict()))
    _deep_merge(base, _normalize_layer(cli_overrides))

    return AppConfig.model_validate(base)
