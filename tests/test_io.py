"""Tests for output writing."""

from __future__ import annotations

import pytest

from article_builder.core.errors import OutputWriteError
from article_builder.rendering.io import atomic_write_text, ensure_output_dir, write_output


def test_write_output_creates_nested_directories(config, project):
    nested = config.model_copy(
        update={"output": config.output.model_copy(update={"dir": str(project / "out" / "a" / "b")})}
    )
    path = write_output(nested, "text")
    assert path == project / "out" / "a" / "b" / "home.txt"
    assert path.read_text(encoding="utf-8") == "text"


def test_write_output_overwrites(config):
    write_output(config, "old")
    path = write_output(config, "new")
    assert path.read_text(encoding="utf-8") == "new"
    assert [p.name for p in path.parent.iterdir()] == ["home.txt"]


def test_output_dir_blocked_by_a_file(config, project, write_file):
    write_file(project / "dist", "not a directory")
    with pytest.raises(OutputWriteError) as excinfo:
        ensure_output_dir(config)
    assert excinfo.value.operation == "create-directory"
    assert excinfo.value.path == project / "dist"


def test_atomic_write_into_missing_directory(tmp_path):
    target = tmp_path / "missing" / "out.txt"
    with pytest.raises(OutputWriteError) as excinfo:
        atomic_write_text(target, "text")
    assert excinfo.value.operation == "open"
    assert not target.exists()
