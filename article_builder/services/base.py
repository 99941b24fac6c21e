"""Base class for build services."""

from __future__ import annotations

from typing import NoReturn

from ..core.errors import ServiceError
from ..core.models import BuildConfiguration


class Service:
    """A stateful helper-backed object with a before/after build lifecycle.

    Services are exposed to templates and components under their ``name``.
    Subclasses override the hooks they need.
    """

    name: str = "Service"

    def __init__(self, config: BuildConfiguration) -> None:
        self.config = config

    def error(self, message: str, info: str | None = None) -> NoReturn:
        """Raise a build failure tagged with this service's name."""
        raise ServiceError(self.name, message, info=info)

    async def before_build(self) -> None:
        """Run before the entry is rendered."""

    async def after_build(self) -> None:
        """Run after rendering has fully completed."""
