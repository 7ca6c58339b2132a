"""Bootstrap snippets that make a shell load the generated functions.

``bash_setup`` sources the bash function file when it exists; ``zsh_setup``
puts the zsh functions directory on ``fpath`` and re-runs ``compinit`` so the
``_<bin>`` function is autoloaded.
"""

from __future__ import annotations

import re
import shlex
from pathlib import Path

from tabgen.completion.templating import render_template

_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")


def env_prefix(bin_name: str) -> str:
    """Environment-variable prefix for *bin_name* (``my-cli`` -> ``MY_CLI``)."""
    return _NON_ALNUM_RE.sub("_", bin_name).upper()


def bash_setup_script(bash_functions_dir: Path, bin_name: str) -> str:
    function_path = Path(bash_functions_dir) / f"{bin_name}.bash"
    return render_template(
        "bash_setup.sh.j2",
        env_prefix=env_prefix(bin_name),
        function_path=shlex.quote(str(function_path)),
    )


def zsh_setup_script(zsh_functions_dir: Path) -> str:
    return render_template(
        "zsh_setup.sh.j2",
        functions_dir=shlex.quote(str(zsh_functions_dir)),
    )
