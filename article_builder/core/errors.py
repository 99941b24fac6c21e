"""Build error taxonomy.

Every failure the pipeline reports is a ``BuildError`` carrying an
``ErrorKind`` discriminant plus a kind-specific payload. The reporting
boundary (``article_builder.reporting``) dispatches on ``kind``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping


class ErrorKind(str, enum.Enum):
    """Discriminant for ``BuildError``."""

    CONFIG_LOAD = "config_load"
    VALIDATION = "validation"
    CONTENT_LOAD = "content_load"
    OUTPUT_WRITE = "output_write"
    RUNTIME = "runtime"
    COMPONENT = "component"


class BuildError(Exception):
    """Base class for all build failures.

    Args:
        kind: Error discriminant
        message: Human-readable description
        info: Optional remediation hint shown after the message
        context: Structured, log-safe details
    """

    kind: ErrorKind = ErrorKind.RUNTIME

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind | None = None,
        info: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind
        self.message = message
        self.info = info
        self.context = dict(context or {})

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "info": self.info,
            "context": self.context,
        }


class ConfigLoadError(BuildError):
    """Raised when a config source cannot be resolved, read or imported."""

    kind = ErrorKind.CONFIG_LOAD

    def __init__(self, message: str, *, source: Path | str | None = None) -> None:
        super().__init__(message, context={"source": str(source) if source else None})
        self.source = Path(source) if source is not None else None


class SubProjectLoadError(ConfigLoadError):
    """Raised when a declared sub-project config fails to load.

    The underlying failure is chained as ``__cause__``.
    """

    def __init__(self, sub_project: str, source: Path | str, cause: Exception) -> None:
        super().__init__(
            f'Cannot load sub-project "{sub_project}" from {source}: {cause}',
            source=source,
        )
        self.sub_project = sub_project
        self.context["sub_project"] = sub_project


@dataclass(frozen=True)
class Violation:
    """A single configuration shape violation."""

    message: str
    location: str = ""
    component: str | None = None

    def __str__(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message


class ValidationError(BuildError):
    """Raised with every violation found while validating a configuration."""

    kind = ErrorKind.VALIDATION

    def __init__(self, violations: Iterable[Violation]) -> None:
        self.violations = list(violations)
        count = len(self.violations)
        super().__init__(
            f"Configuration has {count} error(s)",
            context={"violations": [str(v) for v in self.violations]},
        )

    def by_component(self) -> tuple[dict[str, list[Violation]], list[Violation]]:
        """Split violations into per-component groups and the rest."""
        grouped: dict[str, list[Violation]] = {}
        others: list[Violation] = []
        for violation in self.violations:
            if violation.component is None:
                others.append(violation)
            else:
                grouped.setdefault(violation.component, []).append(violation)
        return grouped, others


class _FileOperationError(BuildError):
    def __init__(self, path: Path | str, operation: str, reason: Exception | str) -> None:
        self.path = Path(path)
        self.operation = operation
        super().__init__(
            f"Cannot {operation} {self.path}: {reason}",
            context={"path": str(self.path), "operation": operation},
        )


class ContentLoadError(_FileOperationError):
    """A filesystem step failed while loading entry, partials or strings."""

    kind = ErrorKind.CONTENT_LOAD


class OutputWriteError(_FileOperationError):
    """A filesystem step failed while writing the generated document."""

    kind = ErrorKind.OUTPUT_WRITE


class ServiceError(BuildError):
    """Raised by a service or when one of its lifecycle hooks fails."""

    kind = ErrorKind.RUNTIME

    def __init__(self, service_name: str, message: str, *, info: str | None = None) -> None:
        super().__init__(
            f'Error in service "{service_name}": {message}',
            info=info,
            context={"service": service_name},
        )
        self.service_name = service_name


class ComponentError(BuildError):
    """Raised when a component fails during rendering."""

    kind = ErrorKind.COMPONENT

    def __init__(self, component_name: str, message: str, *, info: str | None = None) -> None:
        super().__init__(message, info=info, context={"component": component_name})
        self.component_name = component_name
