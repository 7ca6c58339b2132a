"""Completion-script generation -- catalog, topic tree, and dialect emitters.

This sub-package is the core of tabgen. It turns the host CLI's manifest
into the text of the four autocomplete artifacts.

Typical usage::

    from tabgen.completion import build_catalog, write_artifacts

    catalog = build_catalog(manifest.plugins, manifest.topics)
    paths = write_artifacts(catalog, "mycli", ":", cache_dir)

Sub-modules:

* :mod:`~tabgen.completion.sanitize` -- Escapes help text for the scripts.
* :mod:`~tabgen.completion.catalog` -- Builds the per-run
  :class:`~tabgen.models.Catalog` (hidden commands dropped, aliases fanned
  out, one bad command never aborts the run).
* :mod:`~tabgen.completion.topics` -- Derives the topic tree from
  colon-delimited ids.
* :mod:`~tabgen.completion.flags` -- Flag-argument fragments.
* :mod:`~tabgen.completion.bash` / :mod:`~tabgen.completion.zsh` -- The two
  dialect emitters.
* :mod:`~tabgen.completion.bootstrap` -- Setup snippets.
* :mod:`~tabgen.completion.writer` -- Writes everything to disk.
"""

from tabgen.completion.bash import bash_completion_script
from tabgen.completion.bootstrap import bash_setup_script, zsh_setup_script
from tabgen.completion.catalog import build_catalog
from tabgen.completion.flags import public_flags, zsh_flag_arguments
from tabgen.completion.sanitize import sanitize
from tabgen.completion.topics import TopicNode, TopicTree, build_topic_tree, build_topics
from tabgen.completion.writer import AutocompletePaths, write_artifacts
from tabgen.completion.zsh import zsh_completion_script

__all__ = [
    "AutocompletePaths",
    "TopicNode",
    "TopicTree",
    "bash_completion_script",
    "bash_setup_script",
    "build_catalog",
    "build_topic_tree",
    "build_topics",
    "public_flags",
    "sanitize",
    "write_artifacts",
    "zsh_completion_script",
    "zsh_flag_arguments",
    "zsh_setup_script",
]
