"""Configuration shape validation.

Validation never stops at the first problem: scalar fields, the nested
``output`` object, every component and every sub-project key are checked in
one pass and reported together in a single ``ValidationError``.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Iterable, Mapping

import pydantic
from pydantic import ImportString, TypeAdapter

from ..core.errors import ValidationError, Violation
from ..core.models import RESERVED_CONTEXT_NAMES, BuildConfiguration

logger = logging.getLogger(__name__)

_component_adapter: TypeAdapter[Callable[..., Any]] = TypeAdapter(
    ImportString[Callable[..., Any]]
)

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.VAR_POSITIONAL,
)


def _raw_get(raw: Mapping[str, Any], alias: str, name: str) -> Any:
    return raw[alias] if alias in raw else raw.get(name)


def _format_location(loc: Iterable[Any]) -> str:
    return ".".join(str(part) for part in loc)


def _violations_from_pydantic(
    exc: pydantic.ValidationError, *, prefix: tuple[Any, ...] = (), component: str | None = None
) -> list[Violation]:
    violations = []
    for error in exc.errors():
        loc = prefix + tuple(error["loc"])
        owner = component
        if owner is None and len(loc) > 1 and loc[0] == "components":
            owner = str(loc[1])
        violations.append(
            Violation(message=error["msg"], location=_format_location(loc), component=owner)
        )
    return violations


def _accepts_context(func: Callable[..., Any]) -> bool:
    """Return True when ``func`` can take the helper context positionally."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures are given the benefit of the doubt.
        return True
    return any(param.kind in _POSITIONAL_KINDS for param in signature.parameters.values())


def check_components(
    components: Mapping[Any, Any],
) -> tuple[dict[str, Callable[..., Any]], list[Violation]]:
    """Resolve and check every component.

    Args:
        components: Raw component mapping (callables or import strings)

    Returns:
        The successfully resolved components and the violations found
    """
    resolved: dict[str, Callable[..., Any]] = {}
    violations: list[Violation] = []

    for name, value in components.items():
        location = f"components.{name}"
        if not isinstance(name, str) or not name.isidentifier():
            violations.append(
                Violation(
                    f"Component name {name!r} is not a valid identifier",
                    location,
                    component=str(name),
                )
            )
            continue
        if name in RESERVED_CONTEXT_NAMES:
            violations.append(
                Violation(
                    f'Component name "{name}" is reserved by the build pipeline',
                    location,
                    component=name,
                )
            )
            continue

        try:
            func = _component_adapter.validate_python(value)
        except pydantic.ValidationError as exc:
            violations.extend(
                _violations_from_pydantic(exc, prefix=("components", name), component=name)
            )
            continue

        if not _accepts_context(func):
            violations.append(
                Violation(
                    "Component must accept the helper context as its first positional argument",
                    location,
                    component=name,
                )
            )
            continue

        resolved[name] = func

    return resolved, violations


def check_sub_projects(sub_projects: Any) -> list[Violation]:
    """Reject sub-project keys that would replace a pipeline-owned context name.

    A key shared with top-level ``data`` is allowed; the data value wins when
    the render context is layered.
    """
    if not isinstance(sub_projects, Mapping):
        return []

    violations = []
    for key in sub_projects:
        location = f"subProjects.{key}"
        if key in RESERVED_CONTEXT_NAMES:
            violations.append(
                Violation(f'Sub-project key "{key}" is reserved by the build pipeline', location)
            )
    return violations


def validate_config(raw: Any) -> BuildConfiguration:
    """Validate a raw configuration mapping.

    Args:
        raw: Configuration as loaded from a config source

    Returns:
        The validated configuration (output paths not yet interpolated)

    Raises:
        ValidationError: With every violation found
    """
    if isinstance(raw, BuildConfiguration):
        raw = raw.model_dump(by_alias=True)
    if not isinstance(raw, Mapping):
        raise ValidationError(
            [Violation(f"Configuration must be a mapping, got {type(raw).__name__}")]
        )

    payload = dict(raw)
    violations: list[Violation] = []

    components = raw.get("components")
    if isinstance(components, Mapping):
        resolved, component_violations = check_components(components)
        violations.extend(component_violations)
        payload["components"] = resolved

    config: BuildConfiguration | None = None
    try:
        config = BuildConfiguration.model_validate(payload)
    except pydantic.ValidationError as exc:
        violations.extend(_violations_from_pydantic(exc))

    violations.extend(check_sub_projects(_raw_get(raw, "subProjects", "sub_projects")))

    if violations or config is None:
        logger.debug(f"Configuration rejected with {len(violations)} violation(s)")
        raise ValidationError(violations)

    return config
