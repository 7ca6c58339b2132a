"""Turn a command's flag metadata into completion-argument fragments.

Two granularities are produced:

* :func:`zsh_flag_arguments` -- a full ``_arguments`` call for the
  hierarchical (zsh) dialect: short/long exclusion groups, repeatable flags,
  help annotations, and value completion from a fixed choice list or from
  file paths.
* :func:`public_flags` -- the space-joined long flag names used by the
  simple-list (bash) dialect.

Hidden flags are never emitted by either function. Flag summaries are
expected to be sanitized already (see
:func:`~tabgen.completion.catalog.build_catalog`).
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from tabgen.models import FlagSpec

FILES_ONLY = '_arguments "*: :_files"'
"""Fragment used for commands without visible flags."""

_CONTINUATION = " \\\n  "

_DOLLAR_RE = re.compile(r"(\\*)\$")
_TRAILING_BACKSLASHES_RE = re.compile(r"(\\+)\Z")


def zsh_text(text: str) -> str:
    """Keep sanitized help text literal inside ``"...[<text>]"``.

    ``$`` is escaped, and backslashes written just before it are doubled so
    they cannot cancel that escape. A trailing run of backslashes is
    quadrupled: the double-quote layer halves it and the ``[...]`` parser of
    ``_values``/``_arguments`` reads the remaining pairs as literal
    backslashes, so the closing bracket is never escaped.
    """
    text = _DOLLAR_RE.sub(lambda m: m.group(1) * 2 + "\\$", text)
    return _TRAILING_BACKSLASHES_RE.sub(lambda m: m.group(1) * 4, text)


def visible_flags(flags: Mapping[str, FlagSpec]) -> list[FlagSpec]:
    return [flag for flag in flags.values() if not flag.hidden]


def zsh_flag_spec(flag: FlagSpec) -> str:
    """Render one ``_arguments`` spec for *flag*.

    Examples of the generated text::

        "(-f --force)"{-f,--force}"[Force the operation]"
        "*"{-t,--tag}"[Tag to apply]:file:_files"
        --env"[Target environment]:env options:(dev prod)"
    """
    long_name = f"--{flag.name}"
    if flag.char:
        short_name = f"-{flag.char}"
        if flag.multiple:
            spec = f'"*"{{{short_name},{long_name}}}'
        else:
            spec = f'"({short_name} {long_name})"{{{short_name},{long_name}}}'
    else:
        spec = f'"*"{long_name}' if flag.multiple else long_name

    spec += f'"[{zsh_text(flag.summary or "")}]'
    if flag.is_boolean:
        return spec + '"'
    if flag.options:
        return spec + f':{flag.name} options:({" ".join(flag.options)})"'
    return spec + ':file:_files"'


def zsh_flag_arguments(flags: Mapping[str, FlagSpec]) -> str:
    """Build the ``_arguments`` call completing a command's flags and files.

    Without visible flags the call only completes file paths. Otherwise
    ``-S`` is passed so that nothing after a literal ``--`` is completed as a
    flag, every visible flag gets a spec line, and a trailing ``"*: :_files"``
    keeps positional file completion available.

    Args:
        flags: The command's flags keyed by name, in declaration order.

    Returns:
        The fragment; continuation lines are indented by two spaces.
    """
    specs = [zsh_flag_spec(flag) for flag in visible_flags(flags)]
    if not specs:
        return FILES_ONLY
    return _CONTINUATION.join(["_arguments -S", *specs, '"*: :_files"'])


def public_flags(flags: Mapping[str, FlagSpec]) -> str:
    """Return the visible long flag names joined by spaces (``--a --b``)."""
    return " ".join(f"--{flag.name}" for flag in visible_flags(flags))
