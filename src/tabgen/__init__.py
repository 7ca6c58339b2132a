"""tabgen -- Generate static shell tab-completion scripts from CLI metadata.

This package turns a CLI program's declarative command, topic, and flag
metadata into completion scripts for bash and zsh. The scripts are
generated ahead of time and sourced by the shell's completion engine at
interactive-shell startup.

Typical workflow::

    tabgen create --manifest manifest.json   # write all four artifacts
    tabgen show zsh                          # print the zsh function file

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    completion: Catalog, topic tree, and shell-dialect emitters.
    manifest: Loading host metadata from files or live click/typer apps.
"""

__version__ = "0.1.0"
