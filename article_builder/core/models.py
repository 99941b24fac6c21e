"""Domain models for build configuration and render-time state."""

from __future__ import annotations

import enum
import inspect
import json
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Iterator, Mapping

from pydantic import BaseModel, ConfigDict, Field, ImportString, PrivateAttr
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from ..services.base import Service

FILE_SCOPE_HELPER = "__file"
RENDER_STATE_VAR = "__build"

# Names owned by the pipeline in every render context.
RESERVED_CONTEXT_NAMES = frozenset(
    {"config", "strings", "services", FILE_SCOPE_HELPER, RENDER_STATE_VAR}
)


class OutputSpec(BaseModel):
    """Where the generated document goes."""

    model_config = ConfigDict(extra="forbid")

    dir: str = Field(..., description="Output directory (template until loaded)")
    filename: str = Field(..., description="Output filename (template until loaded)")

    @property
    def path(self) -> Path:
        return Path(self.dir) / self.filename


class BuildConfiguration(BaseModel):
    """Configuration for a single build invocation.

    Field names are exposed under their camelCase aliases (``partialsDir``,
    ``subProjects``, ...) so that config files and templates use the same
    spelling. Unknown keys are kept and reach templates through ``config``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    entry: str = Field(..., description="Entry template path")
    partials_dir: str = Field(..., description="Directory of partial templates")
    strings_dir: str = Field(..., description="Directory of <locale>.json files")
    locale: str = Field(..., description="Locale of the strings table")
    output: OutputSpec
    components: dict[str, ImportString[Callable[..., Any]]] = Field(
        ..., description="Helpers callable from templates"
    )
    sub_projects: dict[str, str] | None = Field(
        default=None, description="Sub-project config sources by data key"
    )
    data: dict[str, Any] = Field(..., description="Top-level template data")
    wiki_name: str | None = None
    page_name: str | None = None

    _source: Path | None = PrivateAttr(default=None)
    _sub_project_configs: dict[str, BuildConfiguration] = PrivateAttr(
        default_factory=dict
    )

    @property
    def source(self) -> Path | None:
        """Config file this configuration was loaded from, if any."""
        return self._source

    @property
    def sub_project_configs(self) -> dict[str, BuildConfiguration]:
        return self._sub_project_configs

    def attach(
        self,
        source: Path | None,
        sub_project_configs: Mapping[str, BuildConfiguration] | None = None,
    ) -> BuildConfiguration:
        self._source = source
        self._sub_project_configs = dict(sub_project_configs or {})
        return self

    def to_template_data(self) -> dict[str, Any]:
        """Return the configuration as exposed to templates (``config``)."""
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class TaggedContent:
    """Template text together with the file it was read from."""

    text: str
    source_path: Path

    def wrap(self) -> str:
        """Enclose the text in a file-scope block for its source path."""
        path_literal = json.dumps(str(self.source_path))
        return (
            f"{{% call {FILE_SCOPE_HELPER}({path_literal}) %}}"
            f"{self.text}"
            f"{{% endcall %}}"
        )


class FileScope:
    """Stack of source files currently being evaluated in one render."""

    def __init__(self) -> None:
        self._frames: list[str] = []

    @property
    def current(self) -> str | None:
        return self._frames[-1] if self._frames else None

    @property
    def depth(self) -> int:
        return len(self._frames)

    @contextmanager
    def frame(self, path: str) -> Iterator[str]:
        self._frames.append(path)
        try:
            yield path
        finally:
            self._frames.pop()


@dataclass
class HelperContext:
    """Ambient data handed to a component as its first argument."""

    current_file_path: str | None
    config: BuildConfiguration
    strings: Mapping[str, Any]
    services: Mapping[str, Service]
    data: Mapping[str, Any] = field(default_factory=dict)
    caller: Callable[[], Any] | None = None

    @property
    def has_children(self) -> bool:
        return self.caller is not None

    async def render_children(self) -> str:
        """Render the body of a ``{% call %}`` block."""
        if self.caller is None:
            return ""
        result = self.caller()
        if inspect.isawaitable(result):
            result = await result
        return str(result)


@dataclass
class RenderState:
    """Per-render state shared by the file-scope helper and components."""

    config: BuildConfiguration
    strings: Mapping[str, Any]
    services: Mapping[str, Service]
    file_scope: FileScope = field(default_factory=FileScope)

    def helper_context(
        self, data: Mapping[str, Any], caller: Callable[[], Any] | None = None
    ) -> HelperContext:
        return HelperContext(
            current_file_path=self.file_scope.current,
            config=self.config,
            strings=self.strings,
            services=self.services,
            data=data,
            caller=caller,
        )


@dataclass(frozen=True)
class RegisteredResource:
    """A resource discovered during rendering, copied after the build."""

    input_path: Path
    output_path: Path


class ServiceOwnership(str, enum.Enum):
    """Whether a build runs the lifecycle of the services it uses."""

    OWNED = "owned"
    BORROWED = "borrowed"
