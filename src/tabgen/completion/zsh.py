"""Hierarchical (zsh) completion-function emitter.

The generated file is an autoloadable zsh completion function::

    #compdef mycli

    _mycli_org() { ... }        # one function per topic node
    _mycli_org_user() { ... }

    _mycli() { ... }            # root dispatcher

    _mycli

Every function follows the same two-state ``_arguments -C`` pattern. In the
``cmds`` state it offers the node's immediate children through ``_values``,
annotated with their descriptions. In the ``args`` state it switches on the
chosen child: a child topic delegates to that topic's function, a child
command inlines its flag-argument fragment from
:mod:`tabgen.completion.flags`.

A co-topic (a topic that is also runnable) gets an extra
``_<fn>_flags`` helper completing the command's own flags. It is used when
the current word starts with ``-`` and for arguments that match no child.

The script is assembled from small builders rather than by substituting
into a template, so help text can only ever land inside the quoted
description slots it was escaped for.
"""

from __future__ import annotations

import textwrap

from tabgen.completion.catalog import check_word
from tabgen.completion.flags import zsh_flag_arguments, zsh_text
from tabgen.completion.topics import TopicNode, TopicTree, build_topic_tree, leaf_segment
from tabgen.models import Catalog

_STATE_LOCALS = [
    "local context state state_descr line",
    "typeset -A opt_args",
]
_STATE_MACHINE = '_arguments -C "1: :->cmds" "*::arg:->args"'


def function_name(bin_name: str, path: str = "") -> str:
    """Name of the completion function for *path* (``""`` is the root).

    ``function_name("mycli", "org:user")`` returns ``"_mycli_org_user"``.
    """
    if not path:
        return f"_{bin_name}"
    return f"_{bin_name}_{path.replace(':', '_')}"


def _indent(text: str, level: int) -> str:
    return textwrap.indent(text, "  " * level)


def _values_block(title: str, candidates: list[tuple[str, str]]) -> str:
    if not candidates:
        return "_message 'no more arguments'"
    lines = [f'_values "{title}"']
    lines.extend(f'"{word}[{zsh_text(desc)}]"' for word, desc in candidates)
    return " \\\n  ".join(lines)


def _case_branch(pattern: str, body: str) -> str:
    return f"{pattern})\n{_indent(body, 1)}\n  ;;"


def _children(node: TopicNode) -> list[str]:
    """Immediate children of *node*, co-topics listed once, sorted by id."""
    return sorted(set(node.topics) | set(node.commands))


def _dispatch_body(tree: TopicTree, bin_name: str, child: str) -> str:
    if child in tree:
        return function_name(bin_name, child)
    record = tree.command(child)
    return zsh_flag_arguments(record.flags if record is not None else {})


def _state_function(
    name: str,
    cmds_body: str,
    branches: list[str],
    fallback: str = "",
) -> str:
    """Assemble one ``_arguments -C`` completion function."""
    case_lines = list(branches)
    if fallback:
        case_lines.append(_case_branch("*", fallback))

    parts = [f"{name}() {{"]
    parts.extend(_indent(line, 1) for line in _STATE_LOCALS)
    parts.append("")
    parts.append(_indent(_STATE_MACHINE, 1))
    parts.append("")
    parts.append(_indent('case "$state" in', 1))
    parts.append(_indent("cmds)", 2))
    parts.append(_indent(cmds_body, 3))
    parts.append(_indent(";;", 3))
    parts.append(_indent("args)", 2))
    parts.append(_indent("case $line[1] in", 3))
    parts.extend(_indent(branch, 4) for branch in case_lines)
    parts.append(_indent("esac", 3))
    parts.append(_indent(";;", 3))
    parts.append(_indent("esac", 1))
    parts.append("}")
    return "\n".join(parts) + "\n"


def _node_function(
    tree: TopicTree,
    bin_name: str,
    node: TopicNode,
    title: str,
) -> str:
    name = function_name(bin_name, node.name)
    children = _children(node)
    values = _values_block(
        title, [(leaf_segment(c), tree.description(c)) for c in children]
    )
    branches = [
        _case_branch(f'"{leaf_segment(c)}"', _dispatch_body(tree, bin_name, c))
        for c in children
    ]

    if not tree.is_cotopic(node.name):
        return _state_function(name, values, branches)

    flags_fn = f"{name}_flags"
    record = tree.command(node.name)
    helper = "\n".join(
        [
            f"{flags_fn}() {{",
            _indent(zsh_flag_arguments(record.flags if record else {}), 1),
            "}",
        ]
    )
    cmds_body = "\n".join(
        [
            'if [[ "${words[CURRENT]}" == -* ]]; then',
            _indent(flags_fn, 1),
            "else",
            _indent(values, 1),
            "fi",
        ]
    )
    return helper + "\n\n" + _state_function(name, cmds_body, branches, fallback=flags_fn)


def zsh_completion_script(
    catalog: Catalog,
    bin_name: str,
    tree: TopicTree | None = None,
) -> str:
    """Generate the complete zsh completion function file.

    The output is a pure function of its inputs: topics are emitted in
    lexicographic order and children are sorted, so regenerating from the
    same catalog yields byte-identical text.

    Args:
        catalog: The catalog built for this run.
        bin_name: The program's invocation name.
        tree: A topic tree already built from *catalog*. Built on demand when
            omitted.

    Returns:
        The script text, starting with ``#compdef <bin_name>``.

    Raises:
        GenerationError: If *bin_name* is not a plain shell word.
    """
    check_word(bin_name, "program name")
    if tree is None:
        tree = build_topic_tree(catalog)

    sections = [f"#compdef {bin_name}\n"]
    sections.extend(
        _node_function(tree, bin_name, node, "completions") for node in tree
    )
    sections.append(_node_function(tree, bin_name, tree.root, f"{bin_name} command"))
    sections.append(f"{function_name(bin_name)}\n")
    return "\n".join(sections)
