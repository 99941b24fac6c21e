"""Tests for service construction, ownership and lifecycle hooks."""

from __future__ import annotations

import pytest

from article_builder.core.errors import ServiceError
from article_builder.core.models import ServiceOwnership
from article_builder.services.base import Service
from article_builder.services.image import ImageService
from article_builder.services.registry import (
    create_services,
    obtain_services,
    run_after_hooks,
    run_before_hooks,
)


class Recorder(Service):
    name = "Recorder"
    calls: list[str] = []

    async def before_build(self) -> None:
        self.calls.append(f"{self.name}.before")

    async def after_build(self) -> None:
        self.calls.append(f"{self.name}.after")


class Second(Recorder):
    name = "Second"


class Failing(Recorder):
    name = "Failing"

    async def before_build(self) -> None:
        raise RuntimeError("no network")


@pytest.fixture(autouse=True)
def _reset_calls():
    Recorder.calls = []
    yield
    Recorder.calls = []


def test_services_are_keyed_by_name(config):
    services = create_services(config, (ImageService, Recorder))
    assert list(services) == ["ImageService", "Recorder"]
    assert services["Recorder"].config is config


def test_duplicate_service_names_are_rejected(config):
    with pytest.raises(ServiceError, match="registered twice"):
        create_services(config, (Recorder, Recorder))


def test_fresh_services_are_owned(config):
    collection = obtain_services(config, None, (Recorder,))
    assert collection.ownership is ServiceOwnership.OWNED
    assert collection.owned


def test_existing_services_are_borrowed(config):
    existing = {"Recorder": Recorder(config)}
    collection = obtain_services(config, existing, (ImageService,))
    assert collection.ownership is ServiceOwnership.BORROWED
    assert collection.services == existing


@pytest.mark.asyncio
async def test_hooks_run_in_registration_order(config):
    services = create_services(config, (Recorder, Second))
    await run_before_hooks(services)
    await run_after_hooks(services)
    assert Recorder.calls == ["Recorder.before", "Second.before", "Recorder.after", "Second.after"]


@pytest.mark.asyncio
async def test_failing_hook_stops_later_hooks(config):
    services = create_services(config, (Failing, Second))
    with pytest.raises(ServiceError) as excinfo:
        await run_before_hooks(services)

    assert excinfo.value.service_name == "Failing"
    assert "before_build failed: no network" in str(excinfo.value)
    assert Recorder.calls == []


def test_service_error_helper(config):
    with pytest.raises(ServiceError) as excinfo:
        Recorder(config).error("disk full", info="Free some space")
    assert str(excinfo.value) == 'Error in service "Recorder": disk full'
    assert excinfo.value.info == "Free some space"
