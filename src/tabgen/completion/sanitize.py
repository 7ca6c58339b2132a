"""Escape free-form help text for embedding in completion string literals.

Descriptions end up inside double-quoted strings of the generated scripts,
and in zsh additionally inside ``[...]`` description brackets that the
completion engine parses a second time. :func:`sanitize` prepares text for
both layers.
"""

from __future__ import annotations

import re
from typing import Optional

_QUOTE_RE = re.compile(r'([`"])')
_BRACKET_RE = re.compile(r"([\[\]])")


def sanitize(text: Optional[str]) -> str:
    """Return the first line of *text* with shell-sensitive characters escaped.

    Backticks and double quotes get three backslashes, square brackets get
    two. Nothing else is touched. ``None`` becomes ``""``.

    The transformation is not idempotent: sanitize each description exactly
    once, when the catalog is built.

    Args:
        text: Raw help text, possibly multi-line, or ``None``.

    Returns:
        The escaped first line.
    """
    if text is None:
        return ""
    escaped = _QUOTE_RE.sub(r"\\\\\\\1", text)
    escaped = _BRACKET_RE.sub(r"\\\\\1", escaped)
    return escaped.split("\n")[0]
