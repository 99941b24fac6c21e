"""Build services and their lifecycle."""

from .base import Service
from .image import ImageService, ImageState
from .registry import (
    DEFAULT_SERVICES,
    ServiceCollection,
    create_services,
    obtain_services,
    run_after_hooks,
    run_before_hooks,
)

__all__ = [
    "DEFAULT_SERVICES",
    "ImageService",
    "ImageState",
    "Service",
    "ServiceCollection",
    "create_services",
    "obtain_services",
    "run_after_hooks",
    "run_before_hooks",
]
