"""Tests for failure reporting."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from article_builder.core.errors import (
    BuildError,
    ComponentError,
    ConfigLoadError,
    ContentLoadError,
    ErrorKind,
    SubProjectLoadError,
    ValidationError,
    Violation,
)
from article_builder.reporting import _REPORTERS, report_error


@pytest.fixture
def messages(caplog):
    caplog.set_level(logging.ERROR, logger="article_builder")
    return lambda: [record.getMessage() for record in caplog.records]


def test_every_kind_has_a_reporter():
    assert set(_REPORTERS) == set(ErrorKind)


def test_validation_errors_are_grouped_by_component(messages):
    report_error(
        ValidationError(
            [
                Violation("Field required", "locale"),
                Violation("not callable", "components.box", component="box"),
                Violation("must accept the helper context", "components.box", component="box"),
            ]
        )
    )
    assert messages() == [
        'Error(s) in component "box":',
        "- components.box: not callable",
        "- components.box: must accept the helper context",
        "locale: Field required",
    ]


def test_component_errors_name_the_component(messages):
    report_error(ComponentError("image", "Image path must be a string, got int"))
    assert messages() == ['Error in component "image": Image path must be a string, got int']


def test_sub_project_errors_report_their_cause(messages):
    cause = ValidationError([Violation("Field required", "entry")])
    try:
        raise SubProjectLoadError("intro", Path("/site/intro.json"), cause) from cause
    except SubProjectLoadError as exc:
        report_error(exc)
    logged = messages()
    assert logged[0].startswith('Cannot load sub-project "intro"')
    assert logged[1] == "entry: Field required"


def test_info_follows_the_message(messages):
    report_error(BuildError("Something broke", info="Try again"))
    assert messages() == ["Something broke", "Try again"]


def test_file_errors_report_path_and_operation(messages):
    report_error(ContentLoadError("/site/strings/en.json", "parse", "bad JSON"))
    assert messages() == ["Cannot parse /site/strings/en.json: bad JSON"]


def test_config_load_error_without_cause(messages):
    report_error(ConfigLoadError("Cannot load build config file: /nope.py", source="/nope.py"))
    assert messages() == ["Cannot load build config file: /nope.py"]


def test_unexpected_errors_keep_the_traceback(caplog):
    caplog.set_level(logging.ERROR, logger="article_builder")
    report_error(RuntimeError("surprise"))
    (record,) = caplog.records
    assert record.getMessage() == "Unexpected error: surprise"
    assert record.exc_info is not None
