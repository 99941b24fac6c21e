"""Built-in and stock template components."""

from .file_scope import file_scope
from .image import image

__all__ = ["file_scope", "image"]
