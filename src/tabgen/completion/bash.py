"""Simple-list (bash) completion-script emitter.

The bash dialect works from one static table embedded in the script: every
visible command id (aliases included) followed by its public long flags::

    org:list --all --json
    org:create --name

A single generic function looks the typed command up in that table. There is
no per-topic function and no flag typing; bash only ever sees flag names.

Two lookup variants exist, selected by the host CLI's topic separator:

* ``":"`` -- commands are typed as ``mycli org:list`` and completed with
  bash's colon-aware helpers.
* ``" "`` -- commands are typed as ``mycli org list``; the function joins
  the typed words with ``:`` before the lookup.
"""

from __future__ import annotations

from tabgen.completion.catalog import check_word
from tabgen.completion.flags import public_flags
from tabgen.completion.templating import render_template
from tabgen.exceptions import GenerationError
from tabgen.models import Catalog, TopicSeparator

_TEMPLATES: dict[str, str] = {
    ":": "bash.sh.j2",
    " ": "bash_spaces.sh.j2",
}


def commands_with_flags(catalog: Catalog) -> str:
    """Build the ``<id> <flags>`` table, one line per record, sorted by id."""
    lines = []
    for record in sorted(catalog.commands, key=lambda r: r.id):
        lines.append(f"{record.id} {public_flags(record.flags)}".rstrip())
    return "\n".join(lines)


def bash_completion_script(
    catalog: Catalog,
    bin_name: str,
    topic_separator: TopicSeparator = ":",
) -> str:
    """Generate the bash completion function file.

    Args:
        catalog: The catalog built for this run.
        bin_name: The program's invocation name.
        topic_separator: ``":"`` or ``" "``; picks the lookup variant.

    Returns:
        The script text, registering ``_<bin_name>_autocomplete`` with
        ``complete``.

    Raises:
        GenerationError: If *bin_name* is not a plain shell word or the
            separator is unknown.
    """
    check_word(bin_name, "program name")
    try:
        template = _TEMPLATES[topic_separator]
    except KeyError:
        raise GenerationError(
            f"Unsupported topic separator {topic_separator!r}; use ':' or ' '"
        ) from None
    return render_template(
        template,
        bin=bin_name,
        commands=commands_with_flags(catalog),
    )
