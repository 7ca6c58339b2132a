"""Flatten the host CLI's plugins into completion-ready command records.

:func:`build_catalog` is the only place where user-authored help text is
sanitized. Everything downstream (topic tree, flag specs, dialect emitters)
reads the already-escaped values from the returned
:class:`~tabgen.models.Catalog`.

Besides escaping help text, the catalog checks that every identifier which
lands verbatim in a generated script (command ids, aliases, flag names,
short flags, option values) is a plain shell word. A command failing that
check, or failing model validation, is skipped and logged; the rest of the
catalog is still built.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any, Union

from tabgen.completion.sanitize import sanitize
from tabgen.exceptions import GenerationError
from tabgen.models import (
    Catalog,
    CommandRecord,
    CommandSpec,
    FlagSpec,
    PluginManifest,
    SkippedCommand,
    TopicRecord,
    TopicSpec,
)

logger = logging.getLogger(__name__)

_UNSAFE_WORD_RE = re.compile(r"[\s\"'`\\$\[\](){};|&<>*?#!]")


def check_word(value: str, what: str) -> str:
    """Return *value* unchanged if it can be written unquoted into a script.

    Raises:
        GenerationError: If *value* is empty or contains whitespace, quotes,
            or shell metacharacters.
    """
    if not value or _UNSAFE_WORD_RE.search(value):
        raise GenerationError(f"{what} {value!r} is not a plain shell word")
    return value


def check_id(value: str, what: str = "command id") -> str:
    """Like :func:`check_word`, additionally rejecting empty colon segments."""
    check_word(value, what)
    if "" in value.split(":"):
        raise GenerationError(f"{what} {value!r} has an empty topic segment")
    return value


def _sanitize_flags(spec: CommandSpec) -> dict[str, FlagSpec]:
    flags: dict[str, FlagSpec] = {}
    for key, flag in spec.flags.items():
        if not flag.hidden:
            check_word(flag.name, "flag name")
            if flag.char is not None:
                check_word(flag.char, "short flag")
            for value in flag.options or []:
                check_word(value, f"option value of --{flag.name}")
        flags[key] = flag.model_copy(update={"summary": sanitize(flag.help_text)})
    return flags


def _command_records(spec: CommandSpec) -> list[CommandRecord]:
    """Build the primary record and one record per alias for *spec*."""
    check_id(spec.id)
    for alias in spec.aliases:
        check_id(alias, "alias")

    description = sanitize(spec.summary or spec.description or "")
    flags = _sanitize_flags(spec)

    records = [CommandRecord(id=spec.id, description=description, flags=flags)]
    records.extend(
        CommandRecord(id=alias, description=description, flags=flags)
        for alias in spec.aliases
    )
    return records


def _raw_id(command: Union[CommandSpec, Mapping[str, Any]]) -> str:
    if isinstance(command, CommandSpec):
        return command.id
    return str(command.get("id", "<unknown>"))


def build_catalog(
    plugins: Iterable[PluginManifest],
    topics: Iterable[TopicSpec] = (),
) -> Catalog:
    """Collect every visible command of every plugin into a :class:`Catalog`.

    Hidden commands are dropped entirely. Each visible command contributes
    one record for its id and one per alias; all of them share the same
    sanitized description and the same flags mapping.

    Args:
        plugins: The host CLI's plugins, in load order.
        topics: Declared topics. Their descriptions are sanitized here.

    Returns:
        A catalog of records in plugin/command order, the sanitized topics,
        and the commands that had to be skipped.
    """
    commands: list[CommandRecord] = []
    skipped: list[SkippedCommand] = []

    for plugin in plugins:
        for command in plugin.commands:
            command_id = _raw_id(command)
            try:
                spec = (
                    command
                    if isinstance(command, CommandSpec)
                    else CommandSpec.model_validate(command)
                )
                if spec.hidden:
                    logger.debug("Command '%s' is hidden, skipping", spec.id)
                    continue
                commands.extend(_command_records(spec))
            except Exception as exc:
                logger.warning(
                    "Error creating completion spec for command '%s': %s",
                    command_id,
                    exc,
                )
                skipped.append(SkippedCommand(id=command_id, reason=str(exc)))

    topic_records: list[TopicRecord] = []
    for topic in topics:
        try:
            check_id(topic.name, "topic name")
        except GenerationError as exc:
            logger.warning("Ignoring topic: %s", exc)
            continue
        topic_records.append(
            TopicRecord(name=topic.name, description=sanitize(topic.description))
        )

    return Catalog(
        commands=tuple(commands),
        topics=tuple(topic_records),
        skipped=tuple(skipped),
    )
