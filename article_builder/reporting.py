"""Reporting of build failures.

This is the one place that inspects error kinds; every ``ErrorKind`` has a
reporter in ``_REPORTERS``.
"""

from __future__ import annotations

import logging
from typing import Callable

from .core.errors import (
    BuildError,
    ComponentError,
    ErrorKind,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _report_validation(error: BuildError) -> None:
    assert isinstance(error, ValidationError)
    grouped, others = error.by_component()
    for name, violations in grouped.items():
        logger.error(f'Error(s) in component "{name}":')
        for violation in violations:
            logger.error(f"- {violation}")
    for violation in others:
        logger.error(str(violation))


def _report_component(error: BuildError) -> None:
    assert isinstance(error, ComponentError)
    logger.error(f'Error in component "{error.component_name}": {error.message}')


def _report_config_load(error: BuildError) -> None:
    logger.error(error.message)
    # Sub-project failures carry the underlying error as their cause.
    cause = error.__cause__
    if isinstance(cause, BuildError):
        report_error(cause)


def _report_message(error: BuildError) -> None:
    logger.error(error.message)


_REPORTERS: dict[ErrorKind, Callable[[BuildError], None]] = {
    ErrorKind.CONFIG_LOAD: _report_config_load,
    ErrorKind.VALIDATION: _report_validation,
    ErrorKind.CONTENT_LOAD: _report_message,
    ErrorKind.OUTPUT_WRITE: _report_message,
    ErrorKind.RUNTIME: _report_message,
    ErrorKind.COMPONENT: _report_component,
}

assert set(_REPORTERS) == set(ErrorKind), "every error kind needs a reporter"


def report_error(error: BaseException) -> None:
    """Log a build failure in a form that can be acted on without re-running."""
    if isinstance(error, BuildError):
        _REPORTERS[error.kind](error)
        if error.info:
            logger.error(error.info)
        return
    logger.error(f"Unexpected error: {error}", exc_info=error)
