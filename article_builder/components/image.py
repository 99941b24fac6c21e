"""Stock ``image`` component backed by ``ImageService``."""

from __future__ import annotations

from pathlib import Path

from ..core.errors import ComponentError
from ..core.models import HelperContext
from ..services.image import ImageService

COMPONENT_NAME = "image"


def image(ctx: HelperContext, path: str) -> str:
    """Register an image next to the current file and return its wiki URL.

    Usage: ``{{ image("assets/logo.png") }}``. Relative paths are resolved
    against the directory of the file the call appears in, not the file
    that included it.
    """
    if not isinstance(path, str):
        raise ComponentError(COMPONENT_NAME, f"Image path must be a string, got {type(path).__name__}")

    service = ctx.services.get(ImageService.name)
    if not isinstance(service, ImageService):
        raise ComponentError(COMPONENT_NAME, f"{ImageService.name} is not available in this build")

    image_path = Path(path)
    if not image_path.is_absolute() and ctx.current_file_path is not None:
        image_path = Path(ctx.current_file_path).parent / image_path
    return service.register_image(image_path)
