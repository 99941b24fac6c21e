"""Build orchestration.

``build_unchecked`` runs one build and lets every failure propagate; it is
what library callers and sub-project builds use. ``build`` wraps it, reports
failures and returns ``None`` instead of raising.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence

from jinja2 import TemplateError

from .config.loader import interpolate_output, load_sub_projects, resolve_config
from .config.validation import validate_config
from .content.registry import load_entry, load_partials, load_strings
from .core.errors import BuildError
from .core.models import BuildConfiguration
from .rendering.engine import compose_context, create_environment, render_entry
from .rendering.io import write_output
from .reporting import report_error
from .services.base import Service
from .services.registry import (
    DEFAULT_SERVICES,
    obtain_services,
    run_after_hooks,
    run_before_hooks,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    """Outcome of one build."""

    config: BuildConfiguration
    text: str
    output_path: Path | None = None


def _normalize_overrides(overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Map snake_case field names in ``overrides`` to their config aliases."""
    fields = BuildConfiguration.model_fields
    normalized = {}
    for key, value in overrides.items():
        field = fields.get(key)
        normalized[field.alias if field is not None and field.alias else key] = value
    return normalized


def prepare_config(
    config: BuildConfiguration | Mapping[str, Any],
    config_source: Path | str | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> BuildConfiguration:
    """Merge ``overrides`` onto ``config`` (overrides win) and validate the result.

    A loaded configuration keeps its concrete output paths and its loaded
    sub-projects unless the overrides replace them.
    """
    source = Path(config_source).resolve() if config_source is not None else None
    changes = _normalize_overrides(overrides or {})

    if not isinstance(config, BuildConfiguration):
        raw: Any = {**config, **changes} if isinstance(config, Mapping) else config
        return resolve_config(raw, source)

    source = config.source or source
    merged = validate_config({**config.model_dump(by_alias=True), **changes})
    if "output" in changes:
        interpolate_output(merged, source.parent if source is not None else None)
    if "subProjects" in changes:
        sub_configs = load_sub_projects(merged, source)
    else:
        sub_configs = config.sub_project_configs
    return merged.attach(source, sub_configs)


async def _build_sub_projects(
    config: BuildConfiguration,
    *,
    write: bool,
    service_classes: Sequence[type[Service]],
    shared_services: Mapping[str, Service] | None = None,
) -> dict[str, Any]:
    """Build every sub-project and collect its ``data``.

    With ``shared_services`` the sub-projects borrow those services, and so
    do their own sub-projects; otherwise each build owns fresh ones.
    """
    sub_project_data: dict[str, Any] = {}
    for key, sub_config in config.sub_project_configs.items():
        logger.info(f"Building sub-project '{key}'")
        result = await run_build(
            sub_config,
            sub_config.source,
            existing_services=shared_services,
            write=write,
            service_classes=service_classes,
            share_services=shared_services is not None,
        )
        sub_project_data[key] = result.config.data
    return sub_project_data


async def run_build(
    config: BuildConfiguration | Mapping[str, Any],
    config_source: Path | str | None = None,
    overrides: Mapping[str, Any] | None = None,
    existing_services: Mapping[str, Service] | None = None,
    *,
    write: bool = True,
    service_classes: Sequence[type[Service]] = DEFAULT_SERVICES,
    share_services: bool = False,
) -> BuildResult:
    """Run one build and return its full result. Failures propagate.

    With ``share_services`` the services of this build are obtained before
    its sub-projects are built and handed to them, so a whole multi-part
    document uses one set of services. Owned services then run their
    before-hooks ahead of the sub-project builds and their after-hooks once,
    after this build has rendered.
    """
    config = prepare_config(config, config_source, overrides)
    source = config.source or (Path(config_source).resolve() if config_source else None)
    logger.info(f"Building {source or config.entry}")

    env = create_environment(config.components, load_partials(config))

    collection = None
    if share_services:
        collection = obtain_services(config, existing_services, service_classes)
        if collection.owned:
            await run_before_hooks(collection.services)

    sub_project_data = await _build_sub_projects(
        config,
        write=write,
        service_classes=service_classes,
        shared_services=collection.services if collection is not None else None,
    )

    strings = load_strings(config, source)
    entry = load_entry(config)

    if collection is None:
        collection = obtain_services(config, existing_services, service_classes)
        if collection.owned:
            await run_before_hooks(collection.services)

    context = compose_context(sub_project_data, config, strings, collection.services)
    try:
        text = await render_entry(env, entry, context)
    except TemplateError as exc:
        raise BuildError(f"Template error while rendering {entry.source_path}: {exc}") from exc

    if collection.owned:
        await run_after_hooks(collection.services)

    output_path = write_output(config, text) if write else None
    return BuildResult(config=config, text=text, output_path=output_path)


async def build_unchecked(
    config: BuildConfiguration | Mapping[str, Any],
    config_source: Path | str | None = None,
    overrides: Mapping[str, Any] | None = None,
    existing_services: Mapping[str, Service] | None = None,
    *,
    write: bool = True,
    service_classes: Sequence[type[Service]] = DEFAULT_SERVICES,
    share_services: bool = False,
) -> str:
    """Build a document and return the generated text. Failures propagate.

    Args:
        config: Loaded configuration or raw configuration mapping
        config_source: Config file path; locale files are resolved from it
        overrides: Top-level configuration values that replace ``config``'s
        existing_services: Services owned by an enclosing build; when given,
            no services are created and no lifecycle hooks run
        write: Write the text to ``output.dir/output.filename``
        service_classes: Services to construct when none are supplied
        share_services: Hand this build's services to its sub-projects,
            which then borrow them instead of owning fresh ones

    Returns:
        The generated text
    """
    result = await run_build(
        config,
        config_source,
        overrides,
        existing_services,
        write=write,
        service_classes=service_classes,
        share_services=share_services,
    )
    return result.text


async def build(
    config: BuildConfiguration | Mapping[str, Any],
    config_source: Path | str | None = None,
    overrides: Mapping[str, Any] | None = None,
    existing_services: Mapping[str, Service] | None = None,
    *,
    write: bool = True,
    service_classes: Sequence[type[Service]] = DEFAULT_SERVICES,
    share_services: bool = False,
) -> str | None:
    """Build a document, reporting any failure.

    Returns:
        The generated text, or ``None`` when the build failed
    """
    try:
        return await build_unchecked(
            config,
            config_source,
            overrides,
            existing_services,
            write=write,
            service_classes=service_classes,
            share_services=share_services,
        )
    except Exception as exc:
        report_error(exc)
        return None


def build_sync(*args: Any, **kwargs: Any) -> str | None:
    """Run ``build`` to completion from synchronous code."""
    return asyncio.run(build(*args, **kwargs))
