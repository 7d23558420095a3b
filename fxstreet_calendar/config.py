"""Runtime settings for the calendar poller.

Settings come from an optional YAML file. The path is taken from
``$FXSTREET_CALENDAR_CONFIG`` when set, otherwise ``config.yaml`` in the
working directory. A missing file means defaults; a file that is present but
unusable is a ``ConfigError``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import ConfigError


CONFIG_ENV_VAR = "FXSTREET_CALENDAR_CONFIG"
DEFAULT_CONFIG_PATH = "config.yaml"
SOURCES = ("widget", "file")


@dataclass(frozen=True)
class Settings:
	cache_address: str = "localhost:6379"
	cache_db: int = 15
	interval_seconds: int = 30
	cache_key: str = "forex:calendar"
	rows: int = 50
	source: str = "widget"
	fixture_path: str = "data.html"
	log_level: str = "INFO"


_FIELD_TYPES = {f.name: type(f.default) for f in fields(Settings)}


def config_path() -> Path:
	return Path(os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)


def _coerce(name: str, value: Any) -> Any:
	expected = _FIELD_TYPES[name]
	# bool is an int subclass; "interval_seconds: yes" is a typo, not 1.
	if isinstance(value, bool) or not isinstance(value, expected):
		raise ConfigError(f"{name} must be {expected.__name__}, got {value!r}")
	return value


def settings_from_mapping(raw: Dict[str, Any]) -> Settings:
	unknown = sorted(set(raw) - set(_FIELD_TYPES))
	if unknown:
		raise ConfigError(f"unknown config key(s): {', '.join(unknown)}")
	values = {name: _coerce(name, value) for name, value in raw.items()}
	settings = Settings(**values)
	if settings.interval_seconds <= 0:
		raise ConfigError("interval_seconds must be positive")
	if settings.rows <= 0:
		raise ConfigError("rows must be positive")
	if settings.cache_db < 0:
		raise ConfigError("cache_db must not be negative")
	if settings.source not in SOURCES:
		raise ConfigError(f"source must be one of {', '.join(SOURCES)}, got {settings.source!r}")
	return settings


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
	path = Path(path) if path is not None else config_path()
	if not path.exists():
		return Settings()
	try:
		raw = yaml.safe_load(path.read_text(encoding="utf-8"))
	except (OSError, yaml.YAMLError) as exc:
		raise ConfigError(f"cannot load {path}: {exc}") from exc
	if raw is None:
		return Settings()
	if not isinstance(raw, dict):
		raise ConfigError(f"{path} must contain a mapping, got {type(raw).__name__}")
	return settings_from_mapping(raw)
