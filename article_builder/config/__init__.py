"""Configuration loading, validation and path interpolation."""

from .interpolation import interpolate_path
from .loader import (
    interpolate_output,
    load_config,
    load_sub_projects,
    read_config_source,
    resolve_config,
)
from .validation import validate_config

__all__ = [
    "interpolate_output",
    "interpolate_path",
    "load_config",
    "load_sub_projects",
    "read_config_source",
    "resolve_config",
    "validate_config",
]
