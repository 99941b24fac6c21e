"""Build configuration loading.

A config source is a Python module exporting ``config`` (or ``CONFIG``), a
JSON file or a YAML file. Loading validates the shape, interpolates the
output location once, and recursively loads declared sub-projects.
"""

from __future__ import annotations

import importlib.util
import json
import logging
from pathlib import Path
from typing import Any, Mapping

import yaml

from ..core.errors import BuildError, ConfigLoadError, SubProjectLoadError, ValidationError, Violation
from ..core.models import BuildConfiguration, OutputSpec
from .interpolation import TemplateError, interpolate_path
from .validation import validate_config

logger = logging.getLogger(__name__)

CONFIG_ATTRIBUTES = ("config", "CONFIG")
_ANCHORED_FIELDS = (("entry", "entry"), ("partialsDir", "partials_dir"), ("stringsDir", "strings_dir"))


def _import_python_config(source: Path) -> Any:
    module_name = f"_article_builder_config_{abs(hash(str(source)))}"
    spec = importlib.util.spec_from_file_location(module_name, source)
    if spec is None or spec.loader is None:
        raise ConfigLoadError(f"Cannot load build config file: {source}", source=source)

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise ConfigLoadError(
            f"Cannot import build config file {source}: {exc}", source=source
        ) from exc

    for attribute in CONFIG_ATTRIBUTES:
        if hasattr(module, attribute):
            return getattr(module, attribute)
    raise ConfigLoadError(
        f"Build config file {source} defines none of: {', '.join(CONFIG_ATTRIBUTES)}",
        source=source,
    )


def read_config_source(source: Path) -> Any:
    """Read the raw configuration object from a config source.

    Args:
        source: Absolute path of the config file

    Returns:
        The raw (unvalidated) configuration

    Raises:
        ConfigLoadError: If the file is missing, unsupported or unparsable
    """
    if not source.is_file():
        raise ConfigLoadError(f"Cannot load build config file: {source}", source=source)

    suffix = source.suffix.lower()
    if suffix == ".py":
        return _import_python_config(source)

    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Cannot read build config file {source}: {exc}", source=source) from exc

    try:
        if suffix == ".json":
            return json.loads(text)
        if suffix in (".yaml", ".yml"):
            return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigLoadError(f"Cannot parse build config file {source}: {exc}", source=source) from exc

    raise ConfigLoadError(f"Unsupported build config file type: {source}", source=source)


def _anchor_paths(raw: Mapping[str, Any], base_dir: Path) -> dict[str, Any]:
    """Resolve relative content paths against the config file directory."""
    anchored = dict(raw)
    for alias, name in _ANCHORED_FIELDS:
        key = alias if alias in anchored else name
        value = anchored.get(key)
        if isinstance(value, str) and not Path(value).is_absolute():
            anchored[key] = str(base_dir / value)
    return anchored


def interpolate_output(config: BuildConfiguration, base_dir: Path | None = None) -> BuildConfiguration:
    """Replace ``config.output`` with its interpolated, concrete form.

    Args:
        config: Validated configuration whose output fields are templates
        base_dir: Directory a relative output directory is anchored to

    Returns:
        The same configuration instance

    Raises:
        ValidationError: If either path template cannot be rendered
    """
    resolved: dict[str, str] = {}
    violations: list[Violation] = []
    for field_name in ("dir", "filename"):
        template = getattr(config.output, field_name)
        try:
            resolved[field_name] = interpolate_path(template, config.data)
        except TemplateError as exc:
            violations.append(
                Violation(f"Cannot interpolate path template {template!r}: {exc}", f"output.{field_name}")
            )
    if violations:
        raise ValidationError(violations)

    if base_dir is not None and not Path(resolved["dir"]).is_absolute():
        resolved["dir"] = str(base_dir / resolved["dir"])

    config.output = OutputSpec(**resolved)
    return config


def resolve_config(
    raw: Any,
    source: Path | None = None,
    *,
    _chain: tuple[Path, ...] = (),
) -> BuildConfiguration:
    """Validate, interpolate and attach sub-projects to a raw configuration.

    Args:
        raw: Raw configuration mapping
        source: Config file the mapping came from; relative paths are
            anchored to its directory

    Returns:
        A fully loaded configuration
    """
    base_dir = source.parent if source is not None else None
    if base_dir is not None and isinstance(raw, Mapping):
        raw = _anchor_paths(raw, base_dir)

    config = validate_config(raw)
    interpolate_output(config, base_dir)
    return config.attach(source, load_sub_projects(config, source, _chain=_chain))


def load_sub_projects(
    config: BuildConfiguration,
    source: Path | None,
    *,
    _chain: tuple[Path, ...] = (),
) -> dict[str, BuildConfiguration]:
    """Load every sub-project declared by ``config``.

    References are resolved against the directory of ``source`` (or the
    working directory for configs built in memory).

    Raises:
        SubProjectLoadError: Naming the first sub-project that failed
    """
    base_dir = source.parent if source is not None else Path.cwd()
    chain = _chain + ((source,) if source is not None else ())
    sub_configs: dict[str, BuildConfiguration] = {}
    for key, reference in (config.sub_projects or {}).items():
        sub_source = (base_dir / reference).resolve()
        try:
            if sub_source in chain:
                raise ConfigLoadError(
                    f"Sub-project cycle detected through {sub_source}", source=sub_source
                )
            sub_configs[key] = load_config(sub_source, _chain=chain)
        except BuildError as exc:
            raise SubProjectLoadError(key, sub_source, exc) from exc
        logger.debug(f"Loaded sub-project '{key}' from {sub_source}")
    return sub_configs


def load_config(source: Path | str, *, _chain: tuple[Path, ...] = ()) -> BuildConfiguration:
    """Load a build configuration from a config source.

    Args:
        source: Path of a ``.py``, ``.json``, ``.yaml`` or ``.yml`` config file

    Returns:
        Validated configuration with concrete output paths

    Raises:
        ConfigLoadError: If the source cannot be resolved or imported
        SubProjectLoadError: If a declared sub-project fails to load
        ValidationError: If the configuration shape is invalid
    """
    path = Path(source).expanduser().resolve()
    logger.debug(f"Loading build config: {path}")
    raw = read_config_source(path)
    return resolve_config(raw, path, _chain=_chain)
