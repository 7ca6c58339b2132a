"""Canonical models shared across all tabgen modules.

This is the single source of truth for data shapes in the project. The models
fall into three groups:

**Configuration models** -- serialised as JSON in the user's config directory
or the project directory:
    :class:`GlobalConfig`.

**Manifest models** -- the host CLI's declarative metadata, as loaded from a
manifest file or derived from a live click/typer application:
    :class:`FlagType`, :class:`FlagSpec`, :class:`CommandSpec`,
    :class:`TopicSpec`, :class:`PluginManifest`, and :class:`Manifest`.

**Catalog records** -- immutable, already-sanitized values built once per
generation run and consumed by the emitters:
    :class:`CommandRecord`, :class:`TopicRecord`, :class:`SkippedCommand`,
    and :class:`Catalog`.

Configuration and manifest models use Pydantic v2. Catalog records are frozen
dataclasses so that alias records can share one flags mapping by identity.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TopicSeparator = Literal[":", " "]
"""The host CLI's topic separator: a structural colon or a plain space."""


# --- Configuration ---


class GlobalConfig(BaseModel):
    """Global and project-level tabgen configuration.

    Every field is optional; unset values fall through the precedence chain
    described in :func:`~tabgen.config.resolve_config` and finally to the
    values declared by the manifest itself.
    """

    bin: Optional[str] = Field(
        default=None, description="Program invocation name the scripts complete"
    )
    topic_separator: Optional[TopicSeparator] = Field(
        default=None, description="Topic separator of the host CLI: ':' or ' '"
    )
    manifest: Optional[str] = Field(
        default=None, description="Manifest source: file path, URL, or '-'"
    )
    app: Optional[str] = Field(
        default=None, description="click/typer application as 'module:attribute'"
    )
    cache_dir: Optional[str] = Field(
        default=None, description="Directory receiving the autocomplete artifacts"
    )


# --- Manifest ---


class FlagType(str, enum.Enum):
    """Whether a flag is a bare switch or takes a value."""

    BOOLEAN = "boolean"
    OPTION = "option"


class FlagSpec(BaseModel):
    """Completion-relevant metadata of a single command flag.

    Example::

        FlagSpec(name="env", char="e", type="option", options=["dev", "prod"])
    """

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    char: Optional[str] = Field(default=None, min_length=1, max_length=1)
    type: FlagType = FlagType.BOOLEAN
    multiple: bool = False
    hidden: bool = False
    options: Optional[list[str]] = None
    summary: Optional[str] = None
    description: Optional[str] = None

    @property
    def is_boolean(self) -> bool:
        return self.type == FlagType.BOOLEAN

    @property
    def help_text(self) -> Optional[str]:
        """The summary when present, otherwise the description."""
        return self.summary or self.description


class CommandSpec(BaseModel):
    """A command as declared by the host CLI.

    Flags are keyed by name. A flag entry that omits ``name`` inherits its
    mapping key.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    description: Optional[str] = None
    summary: Optional[str] = None
    hidden: bool = False
    aliases: list[str] = Field(default_factory=list)
    flags: dict[str, FlagSpec] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _fill_flag_names(self) -> CommandSpec:
        for key, flag in self.flags.items():
            if not flag.name:
                flag.name = key
        return self


class TopicSpec(BaseModel):
    """A topic (command group) as declared by the host CLI."""

    model_config = ConfigDict(extra="ignore")

    name: str
    description: Optional[str] = None


class PluginManifest(BaseModel):
    """One plugin of the host CLI and the commands it contributes.

    Raw command dicts are accepted as-is and validated one at a time by
    :func:`~tabgen.completion.catalog.build_catalog`, so a single malformed
    command cannot reject the whole manifest.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    commands: list[
        Annotated[
            Union[CommandSpec, dict[str, Any]], Field(union_mode="left_to_right")
        ]
    ] = Field(default_factory=list)


class Manifest(BaseModel):
    """Everything the host CLI supplies for one generation run.

    ``topics`` may be given either as a list of :class:`TopicSpec` or as a
    mapping of topic name to ``{"description": ...}``.
    """

    model_config = ConfigDict(extra="ignore")

    bin: Optional[str] = None
    topic_separator: Optional[TopicSeparator] = None
    plugins: list[PluginManifest] = Field(default_factory=list)
    topics: list[TopicSpec] = Field(default_factory=list)

    @field_validator("topics", mode="before")
    @classmethod
    def _topics_from_mapping(cls, value: Any) -> Any:  # noqa: ANN401
        if isinstance(value, dict):
            return [
                {"name": name, **(meta if isinstance(meta, dict) else {})}
                for name, meta in value.items()
            ]
        return value


# --- Catalog records ---


@dataclass(frozen=True)
class CommandRecord:
    """A visible command (or alias) with sanitized help text.

    ``flags`` holds copies of the command's flags whose ``summary`` has
    already been sanitized. Alias records share the primary record's
    mapping object.
    """

    id: str
    description: str
    flags: dict[str, FlagSpec] = field(default_factory=dict)


@dataclass(frozen=True)
class TopicRecord:
    """A declared topic with its sanitized description."""

    name: str
    description: str


@dataclass(frozen=True)
class SkippedCommand:
    """A command whose metadata could not be turned into a record."""

    id: str
    reason: str


@dataclass(frozen=True)
class Catalog:
    """The completion-relevant view of the host CLI for one generation run.

    Built once by :func:`~tabgen.completion.catalog.build_catalog` and passed
    explicitly to every emitter.
    """

    commands: tuple[CommandRecord, ...] = ()
    topics: tuple[TopicRecord, ...] = ()
    skipped: tuple[SkippedCommand, ...] = ()

    def command_ids(self) -> list[str]:
        return [c.id for c in self.commands]

    def topic_names(self) -> list[str]:
        return [t.name for t in self.topics]
