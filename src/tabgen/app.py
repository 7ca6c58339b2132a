"""Typer application and CLI entry point for tabgen.

This module wires together the top-level Typer application and its
sub-commands:

* ``create`` -- generate and write the four autocomplete artifacts.
* ``show`` -- print the bash or zsh completion function to stdout.
* ``setup`` -- print the snippet a shell profile needs to load them.
* ``inspect`` -- list the commands and topics that would be completed.

Command metadata comes either from a manifest (``--manifest``, a file, URL,
or ``-`` for stdin) or from a live click/Typer application (``--app
module:attribute``). Options fall back to environment variables and config
files as described in :func:`~tabgen.config.resolve_config`.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under the
data directory.
"""

from __future__ import annotations

import enum
import logging
import signal
import sys
import traceback
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer

from tabgen import __version__
from tabgen.exceptions import InvalidUsageError, TabgenError
from tabgen.exit_codes import EXIT_GENERIC_FAILURE
from tabgen.models import Catalog, GlobalConfig, Manifest, SkippedCommand

app = typer.Typer(
    name="tabgen",
    help="Generate bash and zsh tab-completion scripts from CLI command metadata.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


class Shell(str, enum.Enum):
    BASH = "bash"
    ZSH = "zsh"


# ------------------------------------------------------------------ #
# Shared options
# ------------------------------------------------------------------ #

_MANIFEST_OPTION = typer.Option(
    None, "--manifest", "-m", help="Manifest file, URL, or '-' for stdin."
)
_APP_OPTION = typer.Option(
    None, "--app", help="click/Typer application to introspect, as 'module:attribute'."
)
_BIN_OPTION = typer.Option(
    None, "--bin", "-b", help="Program name to complete (defaults to the manifest's)."
)
_SEPARATOR_OPTION = typer.Option(
    None, "--topic-separator", help="Topic separator of the program: ':' or ' '."
)
_CACHE_DIR_OPTION = typer.Option(
    None, "--cache-dir", help="Directory receiving the autocomplete/ artifacts."
)


@dataclass
class GenerationRun:
    """Everything one command needs to emit scripts."""

    config: GlobalConfig
    manifest: Manifest
    catalog: Catalog
    bin_name: str
    topic_separator: str

    @property
    def cache_dir(self) -> Path:
        from tabgen.config import get_cache_dir

        if self.config.cache_dir:
            return Path(self.config.cache_dir).expanduser()
        return get_cache_dir()


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"tabgen {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Route library log records to stderr.

    Warnings from the catalog are re-reported through the output manager,
    so only errors are shown unless ``--verbose`` is given.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~tabgen.output.OutputManager` from
    CLI flags.
    """
    from tabgen.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    )
    _configure_logging(verbose)


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _fail(exc: TabgenError) -> typer.Exit:
    """Report *exc* and return the ``typer.Exit`` carrying its exit code."""
    from tabgen.output import error

    error(str(exc))
    return typer.Exit(code=exc.exit_code)


def _load_manifest(config: GlobalConfig) -> Manifest:
    from tabgen.manifest import load_manifest, manifest_from_app
    from tabgen.output import debug

    if config.manifest and config.app:
        raise InvalidUsageError("Use either --manifest or --app, not both")
    if config.manifest:
        debug(f"Loading manifest from {config.manifest}")
        return load_manifest(config.manifest)
    if config.app:
        debug(f"Introspecting application {config.app}")
        return manifest_from_app(config.app, bin=config.bin)
    raise InvalidUsageError(
        "No command metadata given. Pass --manifest <file|url|-> or --app module:attribute"
    )


def _prepare(
    manifest: Optional[str] = None,
    app_target: Optional[str] = None,
    bin_name: Optional[str] = None,
    topic_separator: Optional[str] = None,
    cache_dir: Optional[str] = None,
) -> GenerationRun:
    """Resolve configuration, load the metadata, and build the catalog.

    Program name and topic separator fall back to the manifest's own values;
    the separator finally defaults to ``":"``.
    """
    from tabgen.completion import build_catalog
    from tabgen.config import resolve_config

    config = resolve_config(
        manifest=manifest,
        app=app_target,
        bin=bin_name,
        topic_separator=topic_separator,
        cache_dir=cache_dir,
    )
    loaded = _load_manifest(config)

    resolved_bin = config.bin or loaded.bin
    if not resolved_bin:
        raise InvalidUsageError(
            "Program name unknown. Pass --bin or set 'bin' in the manifest"
        )
    separator = config.topic_separator or loaded.topic_separator or ":"

    catalog = build_catalog(loaded.plugins, loaded.topics)
    return GenerationRun(
        config=config,
        manifest=loaded,
        catalog=catalog,
        bin_name=resolved_bin,
        topic_separator=separator,
    )


def _record_skipped(bin_name: str, skipped: tuple[SkippedCommand, ...]) -> Optional[Path]:
    """Warn about skipped commands and append them to the autocomplete log.

    Returns:
        The log path, or ``None`` when nothing was skipped.
    """
    from tabgen.config import get_data_dir
    from tabgen.output import warning

    if not skipped:
        return None

    for item in skipped:
        warning(f"Skipped command '{item.id}': {item.reason}")

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / "autocomplete.log"
    timestamp = datetime.now().isoformat(timespec="seconds")
    with open(log_path, "a", encoding="utf-8") as f:
        for item in skipped:
            f.write(f"{timestamp} {bin_name} {item.id}: {item.reason}\n")
    return log_path


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


@app.command("create")
def create_command(
    manifest: Optional[str] = _MANIFEST_OPTION,
    app_target: Optional[str] = _APP_OPTION,
    bin_name: Optional[str] = _BIN_OPTION,
    topic_separator: Optional[str] = _SEPARATOR_OPTION,
    cache_dir: Optional[str] = _CACHE_DIR_OPTION,
) -> None:
    """Generate the bash and zsh completion files.

    Writes ``bash_setup``, ``zsh_setup``, ``functions/bash/<bin>.bash`` and
    ``functions/zsh/_<bin>`` under ``<cache-dir>/autocomplete``.

    Example::

        tabgen create --manifest commands.yaml
        tabgen create --app mycli.main:app --bin mycli
    """
    from tabgen.completion import write_artifacts
    from tabgen.output import get_output, info, print_json, success, suggest

    try:
        run = _prepare(manifest, app_target, bin_name, topic_separator, cache_dir)
        paths = write_artifacts(
            run.catalog, run.bin_name, run.topic_separator, run.cache_dir
        )
    except TabgenError as exc:
        raise _fail(exc) from None

    log_path = _record_skipped(run.bin_name, run.catalog.skipped)
    if log_path is not None:
        info(f"Skipped commands logged to {log_path}")

    written = [
        paths.bash_setup,
        paths.zsh_setup,
        paths.bash_functions,
        paths.zsh_functions,
    ]
    if get_output().wants_json:
        print_json(
            {
                "bin": run.bin_name,
                "commands": len(run.catalog.commands),
                "skipped": [item.id for item in run.catalog.skipped],
                "files": [str(p) for p in written],
            }
        )
    else:
        for path in written:
            info(f"  {path}")
    success(
        f"Generated completions for '{run.bin_name}' "
        f"({len(run.catalog.commands)} commands)"
    )
    suggest(f"Print the shell setup with: tabgen setup bash|zsh --bin {run.bin_name}")


@app.command("show")
def show_command(
    shell: Shell = typer.Argument(..., help="Shell dialect to print."),
    manifest: Optional[str] = _MANIFEST_OPTION,
    app_target: Optional[str] = _APP_OPTION,
    bin_name: Optional[str] = _BIN_OPTION,
    topic_separator: Optional[str] = _SEPARATOR_OPTION,
) -> None:
    """Print the bash or zsh completion function to stdout.

    Example::

        tabgen show zsh --manifest commands.json > _mycli
    """
    from tabgen.completion import bash_completion_script, zsh_completion_script
    from tabgen.output import print_script

    try:
        run = _prepare(manifest, app_target, bin_name, topic_separator)
        if shell == Shell.BASH:
            script = bash_completion_script(
                run.catalog, run.bin_name, run.topic_separator
            )
        else:
            script = zsh_completion_script(run.catalog, run.bin_name)
    except TabgenError as exc:
        raise _fail(exc) from None

    _record_skipped(run.bin_name, run.catalog.skipped)
    print_script(script)


@app.command("setup")
def setup_command(
    shell: Shell = typer.Argument(..., help="Shell to print the setup snippet for."),
    manifest: Optional[str] = _MANIFEST_OPTION,
    app_target: Optional[str] = _APP_OPTION,
    bin_name: Optional[str] = _BIN_OPTION,
    cache_dir: Optional[str] = _CACHE_DIR_OPTION,
) -> None:
    """Print the snippet that loads the generated completions.

    The metadata source is only read when the program name is not known
    from ``--bin`` or the configuration.

    Example::

        tabgen setup bash --bin mycli >> ~/.bashrc
    """
    from tabgen.completion import AutocompletePaths, bash_setup_script, zsh_setup_script
    from tabgen.completion.catalog import check_word
    from tabgen.config import get_cache_dir, resolve_config
    from tabgen.output import print_script, suggest

    try:
        config = resolve_config(
            manifest=manifest, app=app_target, bin=bin_name, cache_dir=cache_dir
        )
        resolved_bin = config.bin
        if not resolved_bin:
            resolved_bin = _load_manifest(config).bin
        if not resolved_bin:
            raise InvalidUsageError(
                "Program name unknown. Pass --bin or set 'bin' in the manifest"
            )
        check_word(resolved_bin, "program name")
    except TabgenError as exc:
        raise _fail(exc) from None

    base = Path(config.cache_dir).expanduser() if config.cache_dir else get_cache_dir()
    paths = AutocompletePaths.under(base, resolved_bin)
    if shell == Shell.BASH:
        print_script(bash_setup_script(paths.bash_functions_dir, resolved_bin))
        suggest("Append this line to ~/.bashrc, then start a new shell")
    else:
        print_script(zsh_setup_script(paths.zsh_functions_dir))
        suggest("Append these lines to ~/.zshrc, then start a new shell")


@app.command("inspect")
def inspect_command(
    manifest: Optional[str] = _MANIFEST_OPTION,
    app_target: Optional[str] = _APP_OPTION,
    bin_name: Optional[str] = _BIN_OPTION,
    topic_separator: Optional[str] = _SEPARATOR_OPTION,
) -> None:
    """List the topics and commands that completion will offer.

    Example::

        tabgen inspect --manifest commands.json
        tabgen --json inspect --app mycli.main:app
    """
    from tabgen.completion import build_topic_tree
    from tabgen.output import info, print_rows

    try:
        run = _prepare(manifest, app_target, bin_name, topic_separator)
    except TabgenError as exc:
        raise _fail(exc) from None

    tree = build_topic_tree(run.catalog)
    rows: list[list[str]] = [
        [node.name, "topic", tree.description(node.name), ""] for node in tree
    ]
    for record in sorted(run.catalog.commands, key=lambda r: r.id):
        flags = " ".join(
            f"--{flag.name}" for flag in record.flags.values() if not flag.hidden
        )
        rows.append([record.id, "command", record.description, flags])
    rows.sort(key=lambda row: (row[0], row[1]))

    print_rows(
        ["Id", "Kind", "Description", "Flags"],
        rows,
        title=f"{run.bin_name} -- {len(run.catalog.commands)} commands, {len(tree)} topics",
    )
    for item in run.catalog.skipped:
        info(f"Skipped '{item.id}': {item.reason}")


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from tabgen.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``tabgen`` console script.

    Unhandled :class:`~tabgen.exceptions.TabgenError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from tabgen.output import error

        if isinstance(exc, TabgenError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
