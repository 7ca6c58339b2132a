"""Where tabgen keeps its files, and how settings are layered.

Directories
    Linux and the BSDs follow the XDG base directory variables
    (``~/.config/tabgen``, ``~/.cache/tabgen``, ``~/.local/share/tabgen``).
    Other platforms keep everything under ``~/.tabgen``. Generated completion
    artifacts live in the cache directory; crash and skipped-command logs in
    the data directory.

Settings
    The keys of :class:`~tabgen.models.GlobalConfig` can come from four
    places, later ones winning::

        ~/.config/tabgen/config.json    user defaults
        ./tabgen.json                   pinned by the project
        TABGEN_<KEY>                    environment
        --<key>                         command line

    Values the user leaves unset fall back to what the manifest declares.
"""

from __future__ import annotations

import contextlib
import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from tabgen.exceptions import ConfigError
from tabgen.models import GlobalConfig

ENV_PREFIX = "TABGEN_"
"""Environment variables are ``ENV_PREFIX`` plus the upper-cased key."""

PROJECT_CONFIG_NAME = "tabgen.json"

# kind -> (XDG variable, default below $HOME, location below ~/.tabgen)
_DIRS: dict[str, tuple[str, tuple[str, ...], tuple[str, ...]]] = {
    "config": ("XDG_CONFIG_HOME", (".config",), ()),
    "cache": ("XDG_CACHE_HOME", (".cache",), ("cache",)),
    "data": ("XDG_DATA_HOME", (".local", "share"), ("logs",)),
}


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def is_windows() -> bool:
    return platform.system() == "Windows"


def _app_dir(kind: str) -> Path:
    env_var, xdg_default, fallback = _DIRS[kind]
    if _is_xdg_platform():
        base = os.environ.get(env_var) or Path.home().joinpath(*xdg_default)
        path = Path(base) / "tabgen"
    else:
        path = Path.home().joinpath(".tabgen", *fallback)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding ``config.json``; created on first use."""
    return _app_dir("config")


def get_cache_dir() -> Path:
    """Default parent of the ``autocomplete/`` artifact tree; created on first use."""
    return _app_dir("cache")


def get_data_dir() -> Path:
    """Parent of the ``logs/`` directory; created on first use."""
    return _app_dir("data")


def atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* so readers never see a partial file.

    The text goes to a hidden sibling temp file, is fsynced, and is renamed
    over *path*. If anything fails the temp file is removed and the error
    propagates; *path* keeps its previous content.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise


def _read_json_object(path: Path, label: str) -> Optional[dict[str, Any]]:
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return data


def load_global_config() -> GlobalConfig:
    """Read the user's ``config.json``; defaults when there is none.

    Raises:
        ConfigError: The file is not a JSON object or holds invalid values.
    """
    path = get_config_dir() / "config.json"
    data = _read_json_object(path, "global config")
    if data is None:
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def load_project_config() -> Optional[dict[str, Any]]:
    """Raw ``./tabgen.json`` of the working directory, or ``None``.

    Validation happens once all layers are merged.
    """
    return _read_json_object(Path.cwd() / PROJECT_CONFIG_NAME, "project config")


def _env_overrides() -> dict[str, str]:
    values = {key: os.environ.get(f"{ENV_PREFIX}{key.upper()}") for key in GlobalConfig.model_fields}
    return {key: value for key, value in values.items() if value}


def resolve_config(**cli_overrides: Optional[str]) -> GlobalConfig:
    """Merge user, project, environment and command-line settings.

    Args:
        **cli_overrides: Command-line values keyed by
            :class:`~tabgen.models.GlobalConfig` field; ``None`` means the
            option was not given.

    Raises:
        ConfigError: A layer is unreadable, or the merged values are invalid
            (for instance a topic separator other than ``":"`` or ``" "``).
    """
    layers = [
        load_global_config().model_dump(exclude_none=True),
        load_project_config() or {},
        _env_overrides(),
        cli_overrides,
    ]
    merged: dict[str, Any] = {}
    for layer in layers:
        merged.update({key: value for key, value in layer.items() if value is not None})

    try:
        return GlobalConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
