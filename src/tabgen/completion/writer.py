"""Write the four autocomplete artifacts for one generation run.

Layout under ``<cache_dir>/autocomplete/``::

    bash_setup                  # sources functions/bash/<bin>.bash
    zsh_setup                   # adds functions/zsh to fpath, runs compinit
    functions/bash/<bin>.bash   # bash completion function
    functions/zsh/_<bin>        # zsh completion function (#compdef <bin>)

All four texts are generated in memory from the same catalog before the
first file is touched. Writes are atomic per file and never retried; the
first I/O failure aborts the run with :class:`~tabgen.exceptions.OutputError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from tabgen.completion.bash import bash_completion_script
from tabgen.completion.bootstrap import bash_setup_script, zsh_setup_script
from tabgen.completion.topics import build_topic_tree
from tabgen.completion.zsh import zsh_completion_script
from tabgen.config import atomic_write, is_windows
from tabgen.exceptions import InvalidUsageError, OutputError
from tabgen.models import Catalog, TopicSeparator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AutocompletePaths:
    """Where each artifact of a generation run lives."""

    root: Path
    bin_name: str

    @property
    def bash_functions_dir(self) -> Path:
        return self.root / "functions" / "bash"

    @property
    def zsh_functions_dir(self) -> Path:
        return self.root / "functions" / "zsh"

    @property
    def bash_setup(self) -> Path:
        return self.root / "bash_setup"

    @property
    def zsh_setup(self) -> Path:
        return self.root / "zsh_setup"

    @property
    def bash_functions(self) -> Path:
        return self.bash_functions_dir / f"{self.bin_name}.bash"

    @property
    def zsh_functions(self) -> Path:
        return self.zsh_functions_dir / f"_{self.bin_name}"

    @classmethod
    def under(cls, cache_dir: Path, bin_name: str) -> AutocompletePaths:
        return cls(root=Path(cache_dir) / "autocomplete", bin_name=bin_name)


def render_artifacts(
    catalog: Catalog,
    bin_name: str,
    topic_separator: TopicSeparator,
    paths: AutocompletePaths,
) -> dict[Path, str]:
    """Generate the text of every artifact, keyed by destination path."""
    tree = build_topic_tree(catalog)
    return {
        paths.bash_setup: bash_setup_script(paths.bash_functions_dir, bin_name),
        paths.bash_functions: bash_completion_script(catalog, bin_name, topic_separator),
        paths.zsh_setup: zsh_setup_script(paths.zsh_functions_dir),
        paths.zsh_functions: zsh_completion_script(catalog, bin_name, tree),
    }


def write_artifacts(
    catalog: Catalog,
    bin_name: str,
    topic_separator: TopicSeparator,
    cache_dir: Path,
) -> AutocompletePaths:
    """Generate and write all autocomplete artifacts.

    Args:
        catalog: The catalog built for this run.
        bin_name: The program's invocation name.
        topic_separator: ``":"`` or ``" "``; selects the bash lookup variant.
        cache_dir: Base directory; artifacts go to ``<cache_dir>/autocomplete``.

    Returns:
        The :class:`AutocompletePaths` of the written files.

    Raises:
        InvalidUsageError: When running on Windows.
        GenerationError: If the program name or separator is unusable.
        OutputError: If a directory or file cannot be written.
    """
    if is_windows():
        raise InvalidUsageError("Autocomplete is not currently supported on Windows")

    paths = AutocompletePaths.under(cache_dir, bin_name)
    artifacts = render_artifacts(catalog, bin_name, topic_separator, paths)

    for path, text in artifacts.items():
        try:
            atomic_write(path, text)
        except OSError as exc:
            raise OutputError(f"Failed to write {path}: {exc}") from exc
        logger.debug("Wrote %s", path)

    return paths
