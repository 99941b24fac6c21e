"""Image registration and copying."""

from __future__ import annotations

import asyncio
import enum
import logging
import shutil
from pathlib import Path

from ..core.models import BuildConfiguration, RegisteredResource
from ..rendering.io import ensure_output_dir
from .base import Service

logger = logging.getLogger(__name__)

WIKI_FILE_URL = "http://{wiki_name}.wikidot.com/local--files/{page_name}/{filename}"


class ImageState(str, enum.Enum):
    EMPTY = "empty"
    ACCUMULATING = "accumulating"
    FINALIZING = "finalizing"
    DONE = "done"


class ImageService(Service):
    """Collects images referenced while rendering and copies them afterwards.

    Each input file is registered once; its output file name is unique in
    the output directory among the images of this build. A second image
    named ``logo.png`` becomes ``logo_1.png``, a third ``logo_2.png``.
    """

    name = "ImageService"

    def __init__(self, config: BuildConfiguration) -> None:
        super().__init__(config)
        self._images: dict[Path, RegisteredResource] = {}
        self._claimed: set[Path] = set()
        self.state = ImageState.EMPTY

    @property
    def images(self) -> list[RegisteredResource]:
        return list(self._images.values())

    def _unique_output_path(self, input_path: Path) -> Path:
        output_dir = Path(self.config.output.dir).resolve()
        stem, suffix = input_path.stem, input_path.suffix

        candidate = output_dir / input_path.name
        n = 1
        while candidate in self._claimed:
            candidate = output_dir / f"{stem}_{n}{suffix}"
            n += 1
        return candidate

    def _require_wiki_location(self) -> None:
        missing = [
            alias
            for alias, value in (("wikiName", self.config.wiki_name), ("pageName", self.config.page_name))
            if not value
        ]
        if missing:
            self.error(
                f"cannot build an image URL without {' and '.join(missing)}",
                info=f"Set {', '.join(missing)} in the build config.",
            )

    def url_for(self, output_filename: str) -> str:
        self._require_wiki_location()
        return WIKI_FILE_URL.format(
            wiki_name=self.config.wiki_name,
            page_name=self.config.page_name,
            filename=output_filename,
        )

    def register_image(self, image_path: Path | str) -> str:
        """Register an image to be copied to the output directory.

        Args:
            image_path: Path of the source image

        Returns:
            The image URL once uploaded to the wiki page
        """
        self._require_wiki_location()
        input_path = Path(image_path).resolve()
        image = self._images.get(input_path)
        if image is None:
            image = RegisteredResource(input_path, self._unique_output_path(input_path))
            self._images[input_path] = image
            self._claimed.add(image.output_path)
            self.state = ImageState.ACCUMULATING

        output_filename = image.output_path.name
        if output_filename != input_path.name:
            logger.info(
                f"Image file {input_path} is outputted as {output_filename} to avoid name clashes."
            )

        return self.url_for(output_filename)

    async def after_build(self) -> None:
        """Copy every registered image; one failed copy does not stop the others."""
        self.state = ImageState.FINALIZING
        if self._images:
            ensure_output_dir(self.config)
        failures = []
        for image in self._images.values():
            try:
                await asyncio.to_thread(shutil.copyfile, image.input_path, image.output_path)
            except OSError as exc:
                logger.error(
                    f'Error in service "{self.name}": cannot copy {image.input_path} '
                    f"to {image.output_path}: {exc}"
                )
                failures.append(image)
            else:
                logger.debug(f"Copied {image.input_path} -> {image.output_path}")
        self.state = ImageState.DONE

        if failures:
            self.error(
                f"{len(failures)} of {len(self._images)} image(s) could not be copied: "
                + ", ".join(str(image.input_path) for image in failures),
                info="Fix the paths above and rebuild; copied images are left in place.",
            )
