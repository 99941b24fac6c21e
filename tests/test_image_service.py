"""Tests for ImageService registration and copying."""

from __future__ import annotations

import logging

import pytest

from article_builder.core.errors import ServiceError
from article_builder.services.image import ImageService, ImageState


@pytest.fixture
def service(config):
    return ImageService(config)


def test_url_uses_wiki_and_page_names(service, project, write_file):
    logo = write_file(project / "src" / "logo.png", "png")
    assert service.register_image(logo) == "http://scp-wiki.wikidot.com/local--files/Home/logo.png"
    assert service.state is ImageState.ACCUMULATING


def test_same_file_is_registered_once(service, project, write_file):
    logo = write_file(project / "src" / "logo.png", "png")
    first = service.register_image(logo)
    second = service.register_image(project / "src" / ".." / "src" / "logo.png")

    assert first == second
    assert len(service.images) == 1


def test_clashing_names_get_numeric_suffixes(service, project, write_file, caplog):
    paths = [write_file(project / d / "logo.png", d) for d in ("a", "b", "c")]

    with caplog.at_level(logging.INFO, logger="article_builder.services.image"):
        urls = [service.register_image(path) for path in paths]

    assert [url.rsplit("/", 1)[1] for url in urls] == ["logo.png", "logo_1.png", "logo_2.png"]
    outputs = {image.output_path.name for image in service.images}
    assert outputs == {"logo.png", "logo_1.png", "logo_2.png"}
    assert "to avoid name clashes" in caplog.text


@pytest.mark.asyncio
async def test_after_build_copies_images(service, project, config, write_file):
    write_file(project / "a" / "logo.png", "first")
    write_file(project / "b" / "logo.png", "second")
    service.register_image(project / "a" / "logo.png")
    service.register_image(project / "b" / "logo.png")

    await service.after_build()

    dist = project / "dist"
    assert (dist / "logo.png").read_text() == "first"
    assert (dist / "logo_1.png").read_text() == "second"
    assert service.state is ImageState.DONE


@pytest.mark.asyncio
async def test_one_failed_copy_does_not_stop_the_others(service, project, write_file, caplog):
    write_file(project / "one.png", "1")
    write_file(project / "three.png", "3")
    service.register_image(project / "one.png")
    service.register_image(project / "missing.png")
    service.register_image(project / "three.png")

    with pytest.raises(ServiceError) as excinfo:
        await service.after_build()

    dist = project / "dist"
    assert (dist / "one.png").read_text() == "1"
    assert (dist / "three.png").read_text() == "3"
    assert excinfo.value.service_name == "ImageService"
    assert "1 of 3" in excinfo.value.message
    assert "missing.png" in caplog.text


@pytest.mark.asyncio
async def test_nothing_registered_creates_nothing(service, project):
    await service.after_build()
    assert not (project / "dist").exists()
    assert service.state is ImageState.DONE


def test_missing_wiki_location_fails_registration(config, project, write_file):
    logo = write_file(project / "src" / "logo.png", "png")
    service = ImageService(config.model_copy(update={"page_name": None}))

    with pytest.raises(ServiceError) as excinfo:
        service.register_image(logo)

    assert "pageName" in excinfo.value.message
    assert "wikiName" not in excinfo.value.message
    assert excinfo.value.info == "Set pageName in the build config."
    assert service.images == []
