# File: src/mstair/snapshot/render/test_code_formatter.py
"""
Tests for CodeFormatter: indentation, trailing commas, strings and comments,
line endings, whitespace policy, failures, and idempotence.
"""

from __future__ import annotations

import pytest

from mstair.snapshot.render.code_formatter import CodeFormatter, format_code
from mstair.snapshot.render.errors import FormattingFailure
from mstair.snapshot.render.model import FormatProfile, IndentStyle, LineEnding


SAMPLES = [
    "x = [\n1,\n  [\n2,\n3\n  ]\n]",
    "f(\na=1,\nb=2\n)",
    "x = (\n1 +\n2\n)",
    "y = d[\n0\n]",
    'x = [\n"a]",  # note (\n"b"\n]',
    'x = """\n  keep  \n(\n"""',
    'x = "abc\\\ndef"',
    "f([\n1,\n2\n])",
    "x = [\n1,\n2]",
    "f(a,\nb)",
    "f([\n1,\n2])",
    "y = d[\n0]",
    "def f():\n    return {\n'a': 1\n    }",
    "",
    "\n\n\n",
]


# ---------- Layout ----------


@pytest.mark.unit
def test_reindents_and_adds_trailing_commas() -> None:
    text = "x = [\n1,\n  [\n2,\n3\n  ]\n]"
    assert format_code(text) == "x = [\n    1,\n    [\n        2,\n        3,\n    ],\n]\n"


@pytest.mark.unit
def test_call_arguments_get_trailing_comma() -> None:
    assert format_code("f(\na=1,\nb=2\n)") == "f(\n    a=1,\n    b=2,\n)\n"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("x = (\n1 +\n2\n)", "x = (\n    1 +\n    2\n)\n"),
        ("y = d[\n0\n]", "y = d[\n    0\n]\n"),
        ("x = not (\na\n)", "x = not (\n    a\n)\n"),
    ],
)
def test_groups_and_subscripts_get_no_comma(text: str, expected: str) -> None:
    assert format_code(text) == expected


@pytest.mark.unit
def test_comma_goes_before_comment() -> None:
    assert format_code("f(\n    a  # first   \n)") == "f(\n    a,  # first\n)\n"


@pytest.mark.unit
def test_statement_indentation_is_kept() -> None:
    text = "def f():\n    return [\n1,\n2\n    ]"
    assert format_code(text) == "def f():\n    return [\n        1,\n        2,\n    ]\n"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("x = [\n1,\n2]", "x = [\n    1,\n    2,]\n"),
        ("f(a,\nb)", "f(a,\n    b,)\n"),
        ("x = [\n1,\nfoo(2)]", "x = [\n    1,\n    foo(2),]\n"),
        ("f([\n1,\n2])", "f([\n        1,\n        2,])\n"),
        ("y = d[\n0]", "y = d[\n    0]\n"),
        ("x = (\n1 +\n2)", "x = (\n    1 +\n    2)\n"),
    ],
)
def test_closer_sharing_the_last_element_line(text: str, expected: str) -> None:
    assert format_code(text) == expected


# ---------- Strings ----------


@pytest.mark.unit
def test_brackets_in_strings_are_ignored() -> None:
    assert format_code('x = "([{"') == 'x = "([{"\n'
    assert format_code('x = [\n"a]",\n"b"\n]') == 'x = [\n    "a]",\n    "b",\n]\n'
    assert format_code("x = f'{a}('") == "x = f'{a}('\n"


@pytest.mark.unit
def test_multiline_string_content_is_untouched() -> None:
    text = 'x = """\n  keep  \n(\n"""\n'
    assert format_code(text) == text


@pytest.mark.unit
def test_backslash_continued_string() -> None:
    text = 'x = "abc\\\ndef"\n'
    assert format_code(text) == text
    assert format_code('x = [\n"a\\\nb"\n]') == 'x = [\n    "a\\\nb",\n]\n'


# ---------- Profile ----------


@pytest.mark.unit
def test_line_endings() -> None:
    crlf = FormatProfile(line_ending=LineEnding.CRLF)
    assert format_code("a = [\r\n1,\r\n2\r\n]", crlf) == "a = [\r\n    1,\r\n    2,\r\n]\r\n"
    assert format_code("a = 1\r\nb = 2\rc = 3") == "a = 1\nb = 2\nc = 3\n"


@pytest.mark.unit
def test_tab_and_width_indentation() -> None:
    tabs = FormatProfile(indent_style=IndentStyle.TAB)
    assert format_code("a = [\n1,\n2\n]", tabs) == "a = [\n\t1,\n\t2,\n]\n"
    two = FormatProfile(indent_width=2)
    assert format_code("a = [\n1,\n2\n]", two) == "a = [\n  1,\n  2,\n]\n"


@pytest.mark.unit
def test_final_newline_and_trailing_whitespace_policy() -> None:
    assert format_code("x = 1\n\n\n") == "x = 1\n"
    assert format_code("x = 1   \ny = 2\t") == "x = 1\ny = 2\n"

    keep = FormatProfile(insert_final_newline=False, trim_trailing_whitespace=False)
    assert format_code("x = 1   ", keep) == "x = 1   "
    assert format_code("x = 1\n", keep) == "x = 1\n"


# ---------- Failures ----------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("x = (]", "unbalanced"),
        (")", "unbalanced"),
        ("x = (\n1", "unclosed '\\('"),
        ('x = "abc', "unterminated"),
        ('x = """abc', "unterminated"),
        ('x = "abc\\\\\n"', "unterminated string literal on line 1"),
    ],
)
def test_malformed_text_fails(text: str, message: str) -> None:
    with pytest.raises(FormattingFailure, match=message):
        format_code(text)


# ---------- Idempotence ----------


@pytest.mark.unit
@pytest.mark.parametrize("text", SAMPLES)
@pytest.mark.parametrize(
    "profile",
    [
        FormatProfile(),
        FormatProfile(indent_style=IndentStyle.TAB, line_ending=LineEnding.CRLF),
        FormatProfile(indent_width=2, insert_final_newline=False, trim_trailing_whitespace=False),
    ],
)
def test_idempotent(text: str, profile: FormatProfile) -> None:
    formatter = CodeFormatter(profile)
    once = formatter.format(text)
    assert formatter.format(once) == once


# End of file: src/mstair/snapshot/render/test_code_formatter.py
