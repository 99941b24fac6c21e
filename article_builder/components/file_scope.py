"""The built-in ``__file`` block helper."""

from __future__ import annotations

import inspect
from typing import Any, Callable

from jinja2 import pass_context
from jinja2.runtime import Context

from ..core.errors import ComponentError
from ..core.models import FILE_SCOPE_HELPER, RENDER_STATE_VAR, RenderState


@pass_context
async def file_scope(
    context: Context, current_file_path: Any, caller: Callable[[], Any] | None = None
) -> str:
    """Render the enclosed block with ``current_file_path`` as the current file.

    The previous file is restored when the block ends, so sibling partials
    never see each other's path.
    """
    if caller is None:
        raise ComponentError(
            FILE_SCOPE_HELPER, f'"{FILE_SCOPE_HELPER}" must be used as a {{% call %}} block'
        )
    if not isinstance(current_file_path, str):
        raise ComponentError(
            FILE_SCOPE_HELPER,
            f'"{FILE_SCOPE_HELPER}" expects a string path, got {type(current_file_path).__name__}',
        )

    state: RenderState = context[RENDER_STATE_VAR]
    with state.file_scope.frame(current_file_path):
        rendered = caller()
        if inspect.isawaitable(rendered):
            rendered = await rendered
    return rendered
