"""Tests for the command line interface."""

from __future__ import annotations

import json

import pytest
import typer
from typer.testing import CliRunner

from article_builder.cli import app
from article_builder.cli.parsers import coerce_value, parse_override

runner = CliRunner()


@pytest.fixture
def config_file(project, write_file):
    return write_file(
        project / "build.json",
        json.dumps(
            {
                "entry": "src/main.j2",
                "partialsDir": "src/partials",
                "stringsDir": "strings",
                "locale": "en",
                "output": {"dir": "dist", "filename": "{{ slug }}.txt"},
                "components": {},
                "data": {"slug": "home"},
                "wikiName": "scp-wiki",
                "pageName": "Home",
            }
        ),
    )


def test_build_writes_output(config_file, project):
    result = runner.invoke(app, ["build", str(config_file)])
    assert result.exit_code == 0, result.output
    assert (project / "dist" / "home.txt").read_text(encoding="utf-8") == "Hello, Home!"


def test_stdout_skips_the_output_file(config_file, project):
    result = runner.invoke(app, ["build", str(config_file), "--stdout"])
    assert result.exit_code == 0
    assert result.stdout == "Hello, Home!"
    assert not (project / "dist").exists()


def test_set_overrides_config_values(config_file):
    result = runner.invoke(app, ["build", str(config_file), "--stdout", "--set", "pageName=Other"])
    assert result.exit_code == 0
    assert result.stdout == "Hello, Other!"


def test_missing_config_exits_with_error(tmp_path):
    result = runner.invoke(app, ["build", str(tmp_path / "missing.json")])
    assert result.exit_code == 1


def test_malformed_override_is_a_usage_error(config_file):
    result = runner.invoke(app, ["build", str(config_file), "--set", "pageName"])
    assert result.exit_code == 2


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("true", True),
        ("False", False),
        ("42", 42),
        ("-1.5", -1.5),
        ('{"slug": "x"}', {"slug": "x"}),
        ("[1, 2]", [1, 2]),
        ("Home page", "Home page"),
    ],
)
def test_coerce_value(raw, expected):
    assert coerce_value(raw) == expected


def test_parse_override_requires_a_key():
    with pytest.raises(typer.BadParameter):
        parse_override("=value")
    assert parse_override("data={\"slug\": \"a\"}") == ("data", {"slug": "a"})
