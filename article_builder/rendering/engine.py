"""Template rendering engine."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Mapping

from jinja2 import DictLoader, Environment, StrictUndefined, pass_context
from jinja2.runtime import Context

from ..components.file_scope import file_scope
from ..core.errors import BuildError, ComponentError
from ..core.models import (
    FILE_SCOPE_HELPER,
    RENDER_STATE_VAR,
    BuildConfiguration,
    RenderState,
    TaggedContent,
)
from ..services.base import Service

logger = logging.getLogger(__name__)


class Component:
    """A named helper callable from templates.

    The wrapped function receives a ``HelperContext`` followed by the
    template arguments; it may return a string or an awaitable of one.
    Used inside ``{% call %}``, the context exposes the block body through
    ``has_children`` and ``render_children()``.
    """

    def __init__(self, name: str, func: Callable[..., Any]) -> None:
        self.name = name
        self.func = func

    def __repr__(self) -> str:
        return f"<Component {self.name}>"

    @pass_context
    async def __call__(
        self, context: Context, *args: Any, caller: Callable[[], Any] | None = None, **kwargs: Any
    ) -> Any:
        state: RenderState = context[RENDER_STATE_VAR]
        ctx = state.helper_context(context.get_all(), caller)
        try:
            result = self.func(ctx, *args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
        except BuildError:
            raise
        except Exception as exc:
            raise ComponentError(self.name, str(exc)) from exc
        return "" if result is None else result


def create_environment(
    components: Mapping[str, Callable[..., Any]],
    partials: Mapping[str, TaggedContent],
) -> Environment:
    """Create a fresh environment scoped to one build.

    Args:
        components: User helpers by name
        partials: File-tagged partial contents by name

    Returns:
        Async Jinja2 environment with helpers and partials registered
    """
    env = Environment(
        loader=DictLoader({name: partial.wrap() for name, partial in partials.items()}),
        undefined=StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
        enable_async=True,
    )
    env.globals[FILE_SCOPE_HELPER] = file_scope
    for name, func in components.items():
        env.globals[name] = Component(name, func)

    logger.debug(f"Registered {len(components)} component(s) and {len(partials)} partial(s)")
    return env


def compose_context(
    sub_project_data: Mapping[str, Any],
    config: BuildConfiguration,
    strings: Mapping[str, Any],
    services: Mapping[str, Service],
) -> dict[str, Any]:
    """Build the render context.

    Layers from lowest to highest precedence: sub-project data, the config
    ``data`` keys, the strings table keys, the services by name. The
    pipeline namespaces ``config``, ``strings`` and ``services`` are set
    last so no layer can replace them.
    """
    context: dict[str, Any] = {}
    context.update(sub_project_data)
    context.update(config.data)
    context.update(strings)
    context.update(services)

    context["config"] = config.to_template_data()
    context["strings"] = strings
    context["services"] = services

    context[RENDER_STATE_VAR] = RenderState(config=config, strings=strings, services=services)
    return context


async def render_entry(env: Environment, entry: TaggedContent, context: Mapping[str, Any]) -> str:
    """Render the file-tagged entry, awaiting every asynchronous helper."""
    logger.debug(f"Rendering entry: {entry.source_path}")
    template = env.from_string(entry.wrap())
    return await template.render_async(dict(context))
