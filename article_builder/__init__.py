"""article-builder - multi-file wiki article build pipeline.

Compiles an entry template with partials, components, localized strings and
sub-project data into a single text document.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .build import BuildResult, build, build_sync, build_unchecked, prepare_config, run_build
from .config import load_config, validate_config
from .core.errors import (
    BuildError,
    ComponentError,
    ConfigLoadError,
    ContentLoadError,
    ErrorKind,
    OutputWriteError,
    ServiceError,
    SubProjectLoadError,
    ValidationError,
    Violation,
)
from .core.models import BuildConfiguration, HelperContext
from .services import ImageService, Service

__all__ = [
    "BuildConfiguration",
    "BuildError",
    "BuildResult",
    "ComponentError",
    "ConfigLoadError",
    "ContentLoadError",
    "ErrorKind",
    "HelperContext",
    "ImageService",
    "OutputWriteError",
    "Service",
    "ServiceError",
    "SubProjectLoadError",
    "ValidationError",
    "Violation",
    "build",
    "build_sync",
    "build_unchecked",
    "load_config",
    "prepare_config",
    "run_build",
    "validate_config",
]
