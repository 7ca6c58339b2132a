"""Sources of host-CLI metadata: manifest documents and live click/Typer apps."""

from tabgen.manifest.introspect import manifest_from_app, manifest_from_command
from tabgen.manifest.loader import load_manifest, parse_manifest

__all__ = [
    "load_manifest",
    "manifest_from_app",
    "manifest_from_command",
    "parse_manifest",
]
