"""Loading of entry, partial and localized string content.

Every filesystem step is reported separately: a failure names the path and
the operation attempted (``open-directory``, ``open``, ``read``, ``close``
or ``parse``). Nothing is retried.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from ..core.errors import ContentLoadError
from ..core.models import BuildConfiguration, TaggedContent

logger = logging.getLogger(__name__)


def read_text(path: Path) -> str:
    """Read a UTF-8 file, reporting the failing step on error."""
    try:
        handle = path.open("r", encoding="utf-8")
    except OSError as exc:
        raise ContentLoadError(path, "open", exc) from exc

    try:
        text = handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        handle.close()
        raise ContentLoadError(path, "read", exc) from exc

    try:
        handle.close()
    except OSError as exc:
        raise ContentLoadError(path, "close", exc) from exc
    return text


def load_tagged(path: Path | str) -> TaggedContent:
    absolute = Path(path).resolve()
    return TaggedContent(text=read_text(absolute), source_path=absolute)


def load_entry(config: BuildConfiguration) -> TaggedContent:
    """Load the entry template of a build."""
    entry = load_tagged(config.entry)
    logger.debug(f"Loaded entry {entry.source_path}")
    return entry


def load_partials(config: BuildConfiguration) -> dict[str, TaggedContent]:
    """Load every file directly inside ``partialsDir``.

    Partials are named after their file name without extension.
    """
    partials_dir = Path(config.partials_dir)
    try:
        with os.scandir(partials_dir) as entries:
            files = sorted(entry.path for entry in entries if entry.is_file())
    except OSError as exc:
        raise ContentLoadError(partials_dir, "open-directory", exc) from exc

    partials = {}
    for file_path in files:
        path = Path(file_path)
        partials[path.stem] = load_tagged(path)

    logger.debug(f"Loaded {len(partials)} partial(s) from {partials_dir}")
    return partials


def strings_path(config: BuildConfiguration, config_source: Path | str | None) -> Path:
    """Locate ``<stringsDir>/<locale>.json`` relative to the config source."""
    strings_dir = Path(config.strings_dir)
    if not strings_dir.is_absolute() and config_source is not None:
        strings_dir = Path(config_source).resolve().parent / strings_dir
    return (strings_dir / f"{config.locale}.json").resolve()


def load_strings(config: BuildConfiguration, config_source: Path | str | None) -> dict[str, Any]:
    """Load the localized string table of a build."""
    path = strings_path(config, config_source)
    text = read_text(path)
    try:
        strings = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ContentLoadError(path, "parse", exc) from exc

    if not isinstance(strings, dict):
        raise ContentLoadError(path, "parse", "locale file must contain a JSON object")

    logger.debug(f"Loaded {len(strings)} string(s) for locale '{config.locale}'")
    return strings
