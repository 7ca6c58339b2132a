"""Read a command manifest from a file, an http(s) URL, or stdin (``-``).

A manifest describes the host CLI: its plugins and their commands, its
topics, and optionally its program name and topic separator. JSON and YAML
are both accepted::

    bin: mycli
    topic_separator: ":"
    topics:
      org: {description: Manage orgs}
    plugins:
      - name: core
        commands:
          - id: org:list
            description: List orgs
            flags:
              all: {char: a, type: boolean, description: Include disabled orgs}

The format is taken from the file suffix or the response content type when
they name one; otherwise JSON is tried before YAML.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import yaml
from pydantic import ValidationError

from tabgen.exceptions import ManifestError
from tabgen.models import Manifest

_DECODERS: dict[str, Callable[[str], Any]] = {
    "json": json.loads,
    "yaml": yaml.safe_load,
}
_SUFFIX_FORMATS = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def load_manifest(source: str) -> Manifest:
    """Read, decode and validate the manifest at *source*.

    Raises:
        ManifestError: The source is unreachable, undecodable or invalid.
    """
    if source == "-":
        text, fmt = _read_stdin(), None
    elif source.startswith(("http://", "https://")):
        text, fmt = _fetch(source)
    else:
        text, fmt = _read_file(Path(source))
    return parse_manifest(_decode(text, fmt))


def parse_manifest(raw: dict[str, Any]) -> Manifest:
    """Validate a decoded manifest document.

    A command that fails validation stays a raw dict; the catalog skips it
    later without losing the rest of the manifest.

    Raises:
        ManifestError: The document's overall shape is wrong.
    """
    try:
        return Manifest.model_validate(raw)
    except ValidationError as exc:
        raise ManifestError(f"Invalid manifest: {exc}") from exc


def _read_stdin() -> str:
    try:
        text = sys.stdin.read()
    except OSError as exc:
        raise ManifestError(f"Failed to read manifest from stdin: {exc}") from exc
    if not text.strip():
        raise ManifestError("No input received from stdin")
    return text


def _fetch(url: str) -> tuple[str, Optional[str]]:
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise ManifestError(
            f"HTTP {exc.response.status_code} fetching manifest from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise ManifestError(f"Failed to fetch manifest from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    fmt = next((name for name in ("json", "yaml", "yml") if name in content_type), None)
    return response.text, "yaml" if fmt == "yml" else fmt


def _read_file(path: Path) -> tuple[str, Optional[str]]:
    if not path.is_file():
        raise ManifestError(f"Manifest file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Failed to read manifest file {path}: {exc}") from exc
    if not text.strip():
        raise ManifestError(f"Manifest file is empty: {path}")
    return text, _SUFFIX_FORMATS.get(path.suffix.lower())


def _decode(text: str, fmt: Optional[str] = None) -> dict[str, Any]:
    """Decode *text* as *fmt*, or as JSON then YAML when *fmt* is unknown."""
    formats = [fmt] if fmt else ["json", "yaml"]
    problems = []
    for name in formats:
        try:
            document = _DECODERS[name](text)
        except (ValueError, yaml.YAMLError) as exc:
            problems.append((name, exc))
            continue
        if not isinstance(document, dict):
            kind = "empty document" if document is None else type(document).__name__
            raise ManifestError(f"Manifest must be a JSON/YAML object (got {kind})")
        return document

    if len(problems) == 1:
        name, exc = problems[0]
        raise ManifestError(f"Invalid {name.upper()} in manifest: {exc}")
    details = "".join(f"\n  {name.upper()}: {exc}" for name, exc in problems)
    raise ManifestError(f"Manifest is neither JSON nor YAML{details}")
