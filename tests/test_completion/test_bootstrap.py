"""Tests for tabgen.completion.bootstrap -- shell setup snippets."""

from __future__ import annotations

from pathlib import Path

import pytest

from tabgen.completion.bootstrap import bash_setup_script, env_prefix, zsh_setup_script


@pytest.mark.parametrize(
    ("bin_name", "expected"),
    [("mycli", "MYCLI"), ("my-cli", "MY_CLI"), ("sf.v2", "SF_V2")],
)
def test_env_prefix(bin_name: str, expected: str) -> None:
    assert env_prefix(bin_name) == expected


class TestBashSetup:
    def test_snippet(self) -> None:
        text = bash_setup_script(Path("/tmp/ac/functions/bash"), "mycli")
        assert text == (
            "MYCLI_AC_BASH_COMPFUNC_PATH=/tmp/ac/functions/bash/mycli.bash"
            " && test -f $MYCLI_AC_BASH_COMPFUNC_PATH"
            " && source $MYCLI_AC_BASH_COMPFUNC_PATH;\n"
        )

    def test_hyphenated_bin(self) -> None:
        text = bash_setup_script(Path("/x"), "my-cli")
        assert text.startswith("MY_CLI_AC_BASH_COMPFUNC_PATH=/x/my-cli.bash ")

    def test_path_with_spaces_quoted(self) -> None:
        text = bash_setup_script(Path("/Users/Jo Doe/cache"), "mycli")
        assert "='/Users/Jo Doe/cache/mycli.bash' &&" in text


class TestZshSetup:
    def test_snippet(self) -> None:
        text = zsh_setup_script(Path("/tmp/ac/functions/zsh"))
        assert text == (
            "\nfpath=(\n/tmp/ac/functions/zsh\n$fpath\n);\n"
            "autoload -Uz compinit;\ncompinit;\n"
        )

    def test_path_with_spaces_quoted(self) -> None:
        text = zsh_setup_script(Path("/Users/Jo Doe/zsh"))
        assert "\n'/Users/Jo Doe/zsh'\n" in text
