"""Utility helpers shared by the configuration and snapshot loaders."""

from __future__ import annotations

import datetime as dt
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .models import ConfigError


def _read_yaml(path: Path, *, label: str) -> dict[str, typ.Any]:
    """Load a YAML 1.2 mapping from ``path``.

    JSON documents load too, since JSON is a subset of YAML 1.2.
    """
    if not path.exists():
        msg = f"{label} file '{path}' not found."
        raise FileNotFoundError(msg)
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = f"Top-level structure of {label.lower()} '{path}' must be a mapping."
        raise ConfigError(msg)
    return dict(loaded)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _string_tuple(value: object, *, field: str) -> tuple[str, ...]:
    """Return a tuple of non-empty strings from a YAML list."""
    match value:
        case None:
            return ()
        case str() as text:
            return (text,) if text.strip() else ()
        case list() as items:
            return tuple(str(item) for item in items if str(item).strip())
        case _:
            msg = f"'{field}' must be a list of strings."
            raise ConfigError(msg)


def _parse_bool(value: object, *, field: str, default: bool) -> bool:
    """Return a boolean, accepting YAML booleans only."""
    match value:
        case None:
            return default
        case bool() as flag:
            return flag
        case _:
            msg = f"'{field}' must be true or false."
            raise ConfigError(msg)


def _parse_int(value: object, *, field: str, default: int) -> int:
    """Return a non-negative integer for ``field``."""
    match value:
        case None:
            return default
        case bool():
            msg = f"'{field}' must be an integer."
            raise ConfigError(msg)
        case int() as number if number >= 0:
            return number
        case _:
            msg = f"'{field}' must be a non-negative integer."
            raise ConfigError(msg)


def _parse_timestamp(value: dt.datetime | str | None) -> dt.datetime | None:
    """Return a timezone-aware UTC datetime parsed from ``value``, or None."""
    match value:
        case dt.datetime():
            parsed = value
        case dt.date():
            parsed = dt.datetime(value.year, value.month, value.day)
        case str() as text:
            sanitized = text.strip()
            if not sanitized:
                return None
            if sanitized.endswith("Z"):
                sanitized = sanitized[:-1] + "+00:00"
            try:
                parsed = dt.datetime.fromisoformat(sanitized)
            except ValueError:
                return None
        case _:
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(dt.UTC)
