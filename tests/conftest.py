"""Fixtures shared by the tabgen test suite.

The sample manifest in ``fixtures/manifest.json`` describes a ``mycli``
program with two plugins, nested topics, an alias, and hidden commands and
flags. Most completion tests build on the catalog made from it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from tabgen.completion import build_catalog
from tabgen.config import ENV_PREFIX
from tabgen.models import Catalog, GlobalConfig, Manifest
from tabgen.output import reset_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _fresh_output_manager() -> None:
    """CLI flags such as ``--json`` install a manager; never leak it to the next test."""
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Sample manifest
# ---------------------------------------------------------------------------


@pytest.fixture
def manifest_path() -> Path:
    return FIXTURES_DIR / "manifest.json"


@pytest.fixture
def manifest_raw(manifest_path: Path) -> dict[str, Any]:
    return json.loads(manifest_path.read_text(encoding="utf-8"))


@pytest.fixture
def manifest(manifest_raw: dict[str, Any]) -> Manifest:
    return Manifest.model_validate(manifest_raw)


@pytest.fixture
def catalog(manifest: Manifest) -> Catalog:
    """Catalog of the sample manifest: 5 commands (alias included), 2 topics."""
    return build_catalog(manifest.plugins, manifest.topics)


# ---------------------------------------------------------------------------
# Filesystem and environment
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in *tmp_path* with XDG dirs below it and no ``TABGEN_*`` variables.

    Layout: ``config/``, ``cache/`` and ``data/`` under the returned path,
    which is also the working directory (so ``./tabgen.json`` lands there).
    """
    monkeypatch.setattr("tabgen.config._is_xdg_platform", lambda: True)
    for var, sub in (("XDG_CONFIG_HOME", "config"), ("XDG_CACHE_HOME", "cache"), ("XDG_DATA_HOME", "data")):
        monkeypatch.setenv(var, str(tmp_path / sub))
    for key in GlobalConfig.model_fields:
        monkeypatch.delenv(f"{ENV_PREFIX}{key.upper()}", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()
