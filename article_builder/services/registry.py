"""Service construction and lifecycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from ..core.errors import ServiceError
from ..core.models import BuildConfiguration, ServiceOwnership
from .base import Service
from .image import ImageService

logger = logging.getLogger(__name__)

DEFAULT_SERVICES: tuple[type[Service], ...] = (ImageService,)


@dataclass(frozen=True)
class ServiceCollection:
    """Services used by one build and who owns their lifecycle."""

    services: dict[str, Service]
    ownership: ServiceOwnership

    @property
    def owned(self) -> bool:
        return self.ownership is ServiceOwnership.OWNED


def create_services(
    config: BuildConfiguration,
    service_classes: Sequence[type[Service]] = DEFAULT_SERVICES,
) -> dict[str, Service]:
    """Instantiate one service of each class for a build, keyed by name."""
    services: dict[str, Service] = {}
    for service_class in service_classes:
        service = service_class(config)
        if service.name in services:
            raise ServiceError(service.name, "service name registered twice")
        services[service.name] = service
    logger.debug(f"Created services: {list(services)}")
    return services


def obtain_services(
    config: BuildConfiguration,
    existing: Mapping[str, Service] | None = None,
    service_classes: Sequence[type[Service]] = DEFAULT_SERVICES,
) -> ServiceCollection:
    """Reuse ``existing`` services (borrowed) or construct fresh ones (owned)."""
    if existing is not None:
        return ServiceCollection(dict(existing), ServiceOwnership.BORROWED)
    return ServiceCollection(create_services(config, service_classes), ServiceOwnership.OWNED)


async def _run_hooks(services: Iterable[Service], phase: str) -> None:
    for service in services:
        hook = getattr(service, phase)
        logger.debug(f"Running {phase} of {service.name}")
        try:
            await hook()
        except ServiceError:
            raise
        except Exception as exc:
            raise ServiceError(service.name, f"{phase} failed: {exc}") from exc


async def run_before_hooks(services: Mapping[str, Service]) -> None:
    """Await every ``before_build`` hook in registration order."""
    await _run_hooks(services.values(), "before_build")


async def run_after_hooks(services: Mapping[str, Service]) -> None:
    """Await every ``after_build`` hook in registration order."""
    await _run_hooks(services.values(), "after_build")
