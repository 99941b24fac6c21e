"""CLI argument parsers and validators."""

from __future__ import annotations

import json
import re
from typing import Any

import typer

_INT_PATTERN = re.compile(r"^-?\d+$")
_FLOAT_PATTERN = re.compile(r"^-?\d+(?:\.\d+)?$")


def coerce_value(value: str) -> Any:
    """Coerce a string value to its appropriate type.

    JSON objects and arrays are decoded; ``true``/``false`` become bools and
    numeric strings become ints or floats. Anything else stays a string.
    """
    stripped = value.strip()
    if stripped[:1] in ("{", "["):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError as e:
            raise typer.BadParameter(f"Invalid JSON value: {e}") from e

    value_lower = value.lower()
    if value_lower in ("true", "false"):
        return value_lower == "true"

    if _INT_PATTERN.match(value):
        try:
            return int(value)
        except (ValueError, OverflowError):
            return value

    if _FLOAT_PATTERN.match(value):
        try:
            return float(value)
        except (ValueError, OverflowError):
            return value

    return value


def parse_override(value: str) -> tuple[str, Any]:
    """Parse an override argument in format KEY=VALUE."""
    if "=" not in value:
        raise typer.BadParameter(f"Must be KEY=VALUE, got: {value!r}")
    key, raw = value.split("=", 1)
    key = key.strip()
    if not key:
        raise typer.BadParameter(f"Missing key in override: {value!r}")
    return key, coerce_value(raw)


def parse_overrides(values: list[str]) -> dict[str, Any]:
    return dict(map(parse_override, values))
