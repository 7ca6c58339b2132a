"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~tabgen.exceptions.TabgenError` subclass.
Shell wrappers and install scripts can inspect the exit code to determine
the failure class without parsing stderr.

Example::

    $ tabgen create --manifest missing.json
    $ echo $?
    7   # EXIT_MANIFEST_ERROR -- the manifest could not be loaded
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_MANIFEST_ERROR = 7
"""The command manifest could not be loaded, parsed, or validated."""

EXIT_GENERATION_ERROR = 8
"""The completion scripts could not be generated from the catalog."""

EXIT_OUTPUT_ERROR = 9
"""One of the generated artifacts could not be written to disk."""
