"""Settings for a doctrine-check run.

Settings only tune thresholds and scan scope. The rules themselves are an
embedded table (see rules/catalog.py) and can't be added from config.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import ConfigError

SECTION = "doctrine-check"


@dataclass(frozen=True)
class Settings:
    line_warn: int = 500
    line_max: int = 1000
    ignore_dirs: tuple[str, ...] = ()
    disable: tuple[str, ...] = ()
    changelog_scan_lines: int = 20


DEFAULT_SETTINGS = Settings()


def _coerce_str_list(data: dict[str, Any], key: str) -> tuple[str, ...]:
    value = data.get(key, [])
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return tuple(v.strip() for v in value if v.strip())


def _coerce_positive_int(data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"'{key}' must be a positive integer")
    return value


def parse_settings(data: dict[str, Any]) -> Settings:
    """Build Settings from a parsed TOML document.

    Accepts either a ``[doctrine-check]`` table or top-level keys.
    Unknown keys are ignored.
    """
    section = data.get(SECTION, data)
    if not isinstance(section, dict):
        raise ConfigError(f"[{SECTION}] must be a table")

    line_warn = _coerce_positive_int(section, "line_warn", DEFAULT_SETTINGS.line_warn)
    line_max = _coerce_positive_int(section, "line_max", DEFAULT_SETTINGS.line_max)
    if line_warn > line_max:
        raise ConfigError(f"line_warn ({line_warn}) must not exceed line_max ({line_max})")

    return Settings(
        line_warn=line_warn,
        line_max=line_max,
        ignore_dirs=_coerce_str_list(section, "ignore_dirs"),
        disable=_coerce_str_list(section, "disable"),
        changelog_scan_lines=_coerce_positive_int(
            section, "changelog_scan_lines", DEFAULT_SETTINGS.changelog_scan_lines
        ),
    )


def load_settings(path: Path | None) -> Settings:
    """Load settings from a TOML file, or return defaults when path is None."""
    if path is None:
        return DEFAULT_SETTINGS

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config '{path}': {e.strerror or e}") from e

    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in '{path}': {e}") from e

    return parse_settings(data)
