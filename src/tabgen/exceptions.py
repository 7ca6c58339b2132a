"""Errors that end a tabgen run with a specific exit status.

Each class pins the status shell callers see (see :mod:`tabgen.exit_codes`).
Commands report the message and exit with ``exc.exit_code``; anything that
is not a :class:`TabgenError` is treated as a crash.

A command that cannot be completed is not an error: the catalog records it
as skipped and the run goes on.
"""

from tabgen.exit_codes import (
    EXIT_GENERATION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_MANIFEST_ERROR,
    EXIT_OUTPUT_ERROR,
)


class TabgenError(Exception):
    """A failure the user can act on, carrying the process exit status."""

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(TabgenError):
    """Missing or conflicting options, unknown program name, or Windows."""

    exit_code = EXIT_INVALID_USAGE


class ManifestError(TabgenError):
    """The manifest or the ``--app`` target could not be read."""

    exit_code = EXIT_MANIFEST_ERROR


class GenerationError(TabgenError):
    """A value that must appear verbatim in a script is not a plain shell word.

    Per-command occurrences are caught by the catalog; only run-wide values
    such as the program name reach the user.
    """

    exit_code = EXIT_GENERATION_ERROR


class OutputError(TabgenError):
    """An artifact could not be written."""

    exit_code = EXIT_OUTPUT_ERROR


class ConfigError(TabgenError):
    """A config file or setting holds an unusable value."""

    exit_code = EXIT_GENERIC_FAILURE
