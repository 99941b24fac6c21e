"""Path template interpolation for output locations."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from jinja2 import Environment, StrictUndefined, TemplateError

logger = logging.getLogger(__name__)

# Plain environment: no helpers, partials or strings are visible to paths.
_path_env = Environment(
    undefined=StrictUndefined,
    autoescape=False,
    keep_trailing_newline=False,
)


def interpolate_path(template: str, data: Mapping[str, Any]) -> str:
    """Render a path-like template against top-level data.

    Args:
        template: Path template, e.g. ``"build/{{ slug }}"``
        data: The configuration's ``data`` mapping

    Returns:
        The rendered path string

    Raises:
        jinja2.TemplateError: If the template is malformed or references
            an undefined variable
    """
    if "{" not in template:
        return template
    rendered = _path_env.from_string(template).render(dict(data))
    logger.debug(f"Interpolated path {template!r} -> {rendered!r}")
    return rendered


__all__ = ["TemplateError", "interpolate_path"]
