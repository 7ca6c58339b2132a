"""Tests for tabgen.completion.sanitize."""

from __future__ import annotations

import pytest

from tabgen.completion.sanitize import sanitize

BS = "\\"


class TestSanitize:
    def test_none_becomes_empty(self) -> None:
        assert sanitize(None) == ""

    def test_empty_string(self) -> None:
        assert sanitize("") == ""

    def test_plain_text_unchanged(self) -> None:
        assert sanitize("List all orgs") == "List all orgs"

    def test_keeps_first_line_only(self) -> None:
        assert sanitize("First line\nSecond line\nThird") == "First line"

    def test_leading_newline_yields_empty(self) -> None:
        assert sanitize("\nhidden") == ""

    def test_double_quote_gets_three_backslashes(self) -> None:
        assert sanitize('say "hi"') == f'say {BS * 3}"hi{BS * 3}"'

    def test_backtick_gets_three_backslashes(self) -> None:
        assert sanitize("run `ls`") == f"run {BS * 3}`ls{BS * 3}`"

    def test_brackets_get_two_backslashes(self) -> None:
        assert sanitize("[beta] x") == f"{BS * 2}[beta{BS * 2}] x"

    def test_mixed_specials(self) -> None:
        raw = 'Use "x" [y] `z`'
        expected = (
            f'Use {BS * 3}"x{BS * 3}" {BS * 2}[y{BS * 2}] {BS * 3}`z{BS * 3}`'
        )
        assert sanitize(raw) == expected

    @pytest.mark.parametrize("text", ["it's", "a $HOME b", "50% & more", "déjà vu ✓"])
    def test_other_characters_pass_through(self, text: str) -> None:
        assert sanitize(text) == text

    def test_specials_after_newline_are_dropped(self) -> None:
        assert sanitize('ok\n"quoted" [x]') == "ok"

    def test_not_idempotent(self) -> None:
        once = sanitize('"')
        assert sanitize(once) != once
