"""Jinja2 rendering of the static shell script skeletons.

Only the fixed bash scaffolding and the setup snippets live in templates
(``completion/templates/``). Their variables are program names, paths, and
the pre-validated command table; user-authored help text never passes
through here.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape


TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``completion/templates/``)."""


@lru_cache(maxsize=1)
def _create_jinja_env() -> Environment:
    """Create the Jinja2 environment for shell templates.

    Autoescape is disabled (the output is shell, not HTML), trailing
    newlines are preserved so the generated files end cleanly, and
    undefined variables raise instead of rendering as empty strings.

    Returns:
        A configured :class:`~jinja2.Environment` instance.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(enabled_extensions=(), default=False),
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def render_template(name: str, **context: Any) -> str:
    """Render the template *name* with *context*.

    Args:
        name: Template file name relative to :data:`TEMPLATE_DIR`.
        **context: Template variables.

    Returns:
        The rendered text.
    """
    return _create_jinja_env().get_template(name).render(**context)
