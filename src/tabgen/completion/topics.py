"""Derive the topic hierarchy from colon-delimited command identifiers.

The host CLI only supplies flat ids such as ``org:user:list``. This module
rebuilds the implied tree:

1. Every known name (declared topic, command id, and each colon-prefix of a
   command id) is registered under its parent path in a single grouping
   pass, producing an index ``parent -> immediate children``.
2. A name is a *topic* iff it has at least one child in that index. Declared
   topics without descendants are pruned.
3. Each :class:`TopicNode` lists its immediate child topics and child
   commands, sorted lexicographically.

A name can be a topic and a command at the same time (a *co-topic*, e.g.
``org`` when both ``org`` and ``org:list`` are runnable). Such a name shows
up in both child lists of its parent; emitters decide how to render it.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Optional

from tabgen.models import Catalog, CommandRecord

ROOT = ""
"""Parent path of all depth-1 names."""


@dataclass(frozen=True)
class TopicNode:
    """An interior node of the command tree.

    Attributes:
        name: Full colon path (``""`` for the root).
        description: Sanitized help text shown next to the topic.
        topics: Full names of the immediate child topics, sorted.
        commands: Full ids of the immediate child commands, sorted.
    """

    name: str
    description: str = ""
    topics: tuple[str, ...] = ()
    commands: tuple[str, ...] = ()

    @property
    def depth(self) -> int:
        return len(self.name.split(":")) if self.name else 0

    @property
    def segment(self) -> str:
        """Last path segment, i.e. the word typed to reach this node."""
        return leaf_segment(self.name)


def leaf_segment(name: str) -> str:
    return name.rsplit(":", 1)[-1]


def index_children(names: Iterable[str]) -> dict[str, set[str]]:
    """Group *names* and all of their colon-prefixes under their parent path.

    ``index_children(["a:b:c"])`` yields ``{"": {"a"}, "a": {"a:b"},
    "a:b": {"a:b:c"}}``.
    """
    children: dict[str, set[str]] = defaultdict(set)
    for name in names:
        parts = name.split(":")
        children[ROOT].add(parts[0])
        for depth in range(1, len(parts)):
            parent = ":".join(parts[:depth])
            children[parent].add(":".join(parts[: depth + 1]))
    return children


def build_topics(
    topic_names: Iterable[str],
    command_ids: Iterable[str],
) -> list[TopicNode]:
    """Classify names into topics and attach their immediate children.

    Args:
        topic_names: Topics declared by the host CLI.
        command_ids: Ids of all visible commands (aliases included).

    Returns:
        One :class:`TopicNode` per topic, sorted by name. Descriptions are
        left empty; see :func:`build_topic_tree` for the decorated tree.
    """
    commands = set(command_ids)
    index = index_children([*topic_names, *commands])
    topics = {name for name, kids in index.items() if name != ROOT and kids}

    return [
        _node(name, index[name], topics, commands)
        for name in sorted(topics)
    ]


def _node(
    name: str,
    kids: set[str],
    topics: set[str],
    commands: set[str],
    description: str = "",
) -> TopicNode:
    return TopicNode(
        name=name,
        description=description,
        topics=tuple(sorted(k for k in kids if k in topics)),
        commands=tuple(sorted(k for k in kids if k in commands)),
    )


class TopicTree:
    """Explicit command tree keyed by full path.

    Holds the topic nodes, the root node (whose children are the depth-1
    topics and commands), and the command records by id. Built by
    :func:`build_topic_tree`.
    """

    def __init__(
        self,
        nodes: Iterable[TopicNode],
        root: TopicNode,
        commands: dict[str, CommandRecord],
    ) -> None:
        self._nodes = {node.name: node for node in nodes}
        self._root = root
        self._commands = commands

    @property
    def root(self) -> TopicNode:
        return self._root

    def __iter__(self) -> Iterator[TopicNode]:
        """Iterate over the topic nodes in lexicographic order."""
        return iter(self._nodes[name] for name in sorted(self._nodes))

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def topic(self, name: str) -> TopicNode:
        return self._nodes[name]

    def command(self, command_id: str) -> Optional[CommandRecord]:
        return self._commands.get(command_id)

    def is_cotopic(self, name: str) -> bool:
        """Return True when *name* is both a topic and a runnable command."""
        return name in self._nodes and name in self._commands

    def description(self, name: str) -> str:
        """Help text of a topic or command, preferring the topic's own."""
        node = self._nodes.get(name)
        if node is not None and node.description:
            return node.description
        record = self._commands.get(name)
        return record.description if record is not None else ""


def build_topic_tree(catalog: Catalog) -> TopicTree:
    """Build the decorated :class:`TopicTree` for *catalog*.

    Topic descriptions come from the catalog's declared topics; implicit
    topics (prefixes nobody declared) have an empty description. When an id
    occurs more than once (e.g. an alias equal to another command's id) the
    first record wins.
    """
    commands: dict[str, CommandRecord] = {}
    for record in catalog.commands:
        commands.setdefault(record.id, record)

    descriptions = {t.name: t.description for t in catalog.topics}
    index = index_children([*descriptions, *commands])
    topics = {name for name, kids in index.items() if name != ROOT and kids}
    command_set = set(commands)

    nodes = [
        _node(name, index[name], topics, command_set, descriptions.get(name, ""))
        for name in sorted(topics)
    ]
    root = _node(ROOT, index.get(ROOT, set()), topics, command_set)
    return TopicTree(nodes, root, commands)
