"""Shared fixtures: a minimal article project laid out under ``tmp_path``."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from article_builder.config.loader import resolve_config
from article_builder.core.models import BuildConfiguration


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def write_file() -> Callable[[Path, str], Path]:
    return _write


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Entry, empty partials dir and an English strings table."""
    _write(tmp_path / "src" / "main.j2", "{{ greeting }}, {{ config.pageName }}!")
    (tmp_path / "src" / "partials").mkdir(parents=True)
    _write(tmp_path / "strings" / "en.json", '{"greeting": "Hello"}')
    return tmp_path


@pytest.fixture
def raw_config(project: Path) -> dict[str, Any]:
    return {
        "entry": str(project / "src" / "main.j2"),
        "partialsDir": str(project / "src" / "partials"),
        "stringsDir": str(project / "strings"),
        "locale": "en",
        "output": {"dir": str(project / "dist"), "filename": "{{ slug }}.txt"},
        "components": {},
        "data": {"slug": "home"},
        "wikiName": "scp-wiki",
        "pageName": "Home",
    }


@pytest.fixture
def config(raw_config: dict[str, Any]) -> BuildConfiguration:
    return resolve_config(raw_config)
