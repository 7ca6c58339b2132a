"""Derive a manifest from a live click or Typer application.

Instead of maintaining a manifest file by hand, a Python CLI can be
introspected directly::

    tabgen create --app mycli.main:app

The target is imported, converted to a :class:`click.Command` (Typer apps
go through :func:`typer.main.get_command`), and walked recursively:

* every non-hidden :class:`click.Group` becomes a topic whose description is
  the first line of its help text;
* every non-hidden leaf command becomes a command whose id is the colon-joined
  path of names below the root (``org user list`` -> ``org:user:list``);
* a group that runs without a subcommand (``invoke_without_command``) is
  additionally a command, i.e. a co-topic;
* every :class:`click.Option` becomes a :class:`~tabgen.models.FlagSpec`.
"""

from __future__ import annotations

import enum
import importlib
import logging
from typing import Any, Optional

import click
import typer

from tabgen.exceptions import ManifestError
from tabgen.models import (
    CommandSpec,
    FlagSpec,
    FlagType,
    Manifest,
    PluginManifest,
    TopicSpec,
)

logger = logging.getLogger(__name__)

_SKIPPED_OPTIONS = {"help", "install_completion", "show_completion"}


def load_app(target: str) -> Any:  # noqa: ANN401
    """Import the object named by ``module:attribute``.

    The attribute part may be dotted (``pkg.cli:groups.main``).

    Raises:
        ManifestError: If the target is malformed or cannot be imported.
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ManifestError(
            f"Invalid application target '{target}'; expected 'module:attribute'"
        )

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ManifestError(f"Could not import module '{module_name}': {exc}") from exc

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as exc:
            raise ManifestError(
                f"Module '{module_name}' has no attribute '{attr_path}'"
            ) from exc
    return obj


def to_click_command(app: Any) -> Any:  # noqa: ANN401
    """Return the click command behind a Typer app or click command.

    Newer typer releases ship their own copy of click, so the result is
    recognised by its interface rather than by :class:`click.Command`.

    Raises:
        ManifestError: If *app* is neither.
    """
    if isinstance(app, typer.Typer):
        return typer.main.get_command(app)
    if _is_command(app):
        return app
    raise ManifestError(
        f"Expected a typer.Typer or click.Command, got {type(app).__name__}"
    )


def _is_command(obj: Any) -> bool:  # noqa: ANN401
    return isinstance(obj, click.Command) or (
        hasattr(obj, "params") and hasattr(obj, "context_class")
    )


def _is_group(command: Any) -> bool:  # noqa: ANN401
    return callable(getattr(command, "list_commands", None)) and callable(
        getattr(command, "get_command", None)
    )


def _is_option(param: Any) -> bool:  # noqa: ANN401
    return getattr(param, "param_type_name", None) == "option"


def _first_line(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    stripped = text.strip()
    return stripped.splitlines()[0] if stripped else None


def _choice_values(param_type: Any) -> Optional[list[str]]:  # noqa: ANN401
    choices = getattr(param_type, "choices", None)
    if choices is None:
        return None
    return [
        choice.name if isinstance(choice, enum.Enum) else str(choice)
        for choice in choices
    ]


def flag_from_option(option: click.Option) -> Optional[FlagSpec]:
    """Convert a click option to a flag, or ``None`` if it has no long name."""
    long_opts = [o for o in option.opts if o.startswith("--")]
    if not long_opts:
        return None
    short_opts = [o for o in option.opts if len(o) == 2 and o[0] == "-" and o[1] != "-"]

    is_boolean = option.is_flag or option.count
    return FlagSpec(
        name=max(long_opts, key=len)[2:],
        char=short_opts[0][1] if short_opts else None,
        type=FlagType.BOOLEAN if is_boolean else FlagType.OPTION,
        multiple=option.multiple or option.count,
        hidden=option.hidden,
        options=None if is_boolean else _choice_values(option.type),
        summary=_first_line(option.help),
    )


def _command_spec(command_id: str, command: Any) -> CommandSpec:  # noqa: ANN401
    flags: dict[str, FlagSpec] = {}
    for param in command.params:
        if not _is_option(param) or param.name in _SKIPPED_OPTIONS:
            continue
        flag = flag_from_option(param)
        if flag is not None:
            flags[flag.name] = flag
    return CommandSpec(
        id=command_id,
        summary=command.short_help,
        description=command.help,
        flags=flags,
    )


def _walk(
    group: Any,  # noqa: ANN401
    ctx: Any,  # noqa: ANN401
    prefix: str,
    commands: list[CommandSpec],
    topics: list[TopicSpec],
) -> None:
    for name in sorted(group.list_commands(ctx)):
        command = group.get_command(ctx, name)
        if command is None or command.hidden:
            continue
        command_id = f"{prefix}{name}"
        if _is_group(command):
            topics.append(
                TopicSpec(name=command_id, description=_first_line(command.help))
            )
            if command.invoke_without_command:
                commands.append(_command_spec(command_id, command))
            sub_ctx = command.context_class(command, info_name=name, parent=ctx)
            _walk(command, sub_ctx, f"{command_id}:", commands, topics)
        else:
            commands.append(_command_spec(command_id, command))


def manifest_from_command(
    app: Any,  # noqa: ANN401
    bin: Optional[str] = None,
) -> Manifest:
    """Build a :class:`~tabgen.models.Manifest` from a Typer app or click group.

    Args:
        app: A :class:`typer.Typer` or :class:`click.Group`.
        bin: Program name. Defaults to the root command's name.

    Raises:
        ManifestError: If *app* is not a CLI object or has no subcommands.
    """
    root = to_click_command(app)
    if not _is_group(root):
        raise ManifestError(
            f"Command '{root.name or bin}' has no subcommands to complete"
        )

    commands: list[CommandSpec] = []
    topics: list[TopicSpec] = []
    ctx = root.context_class(root, info_name=bin or root.name)
    _walk(root, ctx, "", commands, topics)
    logger.debug(
        "Introspected %d commands and %d topics from %s",
        len(commands),
        len(topics),
        root.name,
    )

    return Manifest(
        bin=bin or root.name,
        plugins=[PluginManifest(name=root.name or "", commands=commands)],
        topics=topics,
    )


def manifest_from_app(target: str, bin: Optional[str] = None) -> Manifest:
    """Import ``module:attribute`` and introspect it.

    Example::

        manifest = manifest_from_app("mycli.main:app", bin="mycli")

    Raises:
        ManifestError: If the target cannot be imported or is not a
            click/Typer CLI with subcommands.
    """
    return manifest_from_command(load_app(target), bin=bin)
