# File: src/mstair/snapshot/render/code_formatter.py
"""
Purely syntactic layout of generated Python source.

`CodeFormatter.format()` re-indents lines inside brackets by bracket depth, adds
the trailing comma after the last element of multi-line displays and calls, trims
trailing whitespace, normalizes line endings, and ends the text with a single
newline. Lines outside brackets keep their own indentation; bracketed lines are
indented relative to the statement that opened them.

It understands strings and comments well enough never to change them: brackets,
quotes and `#` inside literals are ignored, and lines that begin inside a
multi-line string are left untouched.

Formatting is idempotent: `format(format(x)) == format(x)`.
"""

from __future__ import annotations

import keyword
import re
from dataclasses import dataclass, field
from typing import Final

from mstair.snapshot.render.errors import FormattingFailure
from mstair.snapshot.render.model import FormatProfile


__all__ = [
    "CodeFormatter",
    "format_code",
]

_OPENERS: Final[str] = "([{"
_CLOSERS: Final[str] = ")]}"
_PAIRS: Final[dict[str, str]] = {"(": ")", "[": "]", "{": "}"}
_NO_COMMA_AFTER: Final[str] = "([{,"
_TRAILING_NAME_RE: Final[re.Pattern[str]] = re.compile(r"[A-Za-z_][A-Za-z_0-9]*$")


@dataclass(frozen=True, slots=True)
class _Bracket:
    char: str
    line_index: int
    lineno: int
    accepts_trailing_comma: bool


@dataclass(slots=True)
class _ScanState:
    """Lexical state carried from one line to the next."""

    stack: list[_Bracket] = field(default_factory=list)
    quote: str | None = None
    code_tail: str = ""
    statement_indent: str = ""


class CodeFormatter:
    """Lays out source text according to a `FormatProfile`."""

    def __init__(self, profile: FormatProfile | None = None) -> None:
        self.profile = profile or FormatProfile()

    def format(self, text: str) -> str:
        """
        Return `text` laid out per the profile.

        :raises FormattingFailure: On unbalanced brackets or unterminated strings.
        """
        unit = self.profile.indent_unit
        lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        out: list[str] = []
        code_ends: list[int | None] = []
        state = _ScanState()

        for lineno, line in enumerate(lines, start=1):
            if state.quote is None:
                body = line.lstrip()
                if not body:
                    line = ""
                elif not state.stack:
                    state.statement_indent = line[: len(line) - len(body)]
                else:
                    closers = len(body) - len(body.lstrip(_CLOSERS))
                    if closers and state.stack[-1].accepts_trailing_comma:
                        _insert_trailing_comma(out, code_ends, state.stack[-1].line_index)
                    level = max(len(state.stack) - closers, 0)
                    line = state.statement_indent + unit * level + body

            line, code_end = _scan_line(line, lineno, len(out), state)
            if self.profile.trim_trailing_whitespace and state.quote is None:
                line = line.rstrip()
            out.append(line)
            code_ends.append(code_end)

        if state.quote is not None:
            raise FormattingFailure(f"unterminated string literal at end of text ({state.quote})")
        if state.stack:
            opener = state.stack[-1]
            raise FormattingFailure(f"unclosed '{opener.char}' opened on line {opener.lineno}")

        if self.profile.insert_final_newline:
            while out and not out[-1]:
                out.pop()
            out.append("")
        return self.profile.line_ending.value.join(out)


def format_code(text: str, profile: FormatProfile | None = None) -> str:
    """Shorthand for `CodeFormatter(profile).format(text)`."""
    return CodeFormatter(profile).format(text)


def _scan_line(
    line: str,
    lineno: int,
    line_index: int,
    state: _ScanState,
) -> tuple[str, int | None]:
    """
    Advance `state` over one line.

    A closer that shares its line with the last element of a bracket opened on an
    earlier line gets a trailing comma in front of it, when the bracket accepts one.

    :return: The line, with any comma added, and the index just past its last code
        character (not comment or blank), or None if the line holds no code.
    """
    code_end: int | None = None
    hugging_close: int | None = None
    continued = False
    i = 0
    while i < len(line):
        ch = line[i]
        if state.quote is not None:
            if ch == "\\":
                continued = i == len(line) - 1
                i += 2
                continue
            if line.startswith(state.quote, i):
                i += len(state.quote)
                state.quote = None
                code_end = i
                continue
            i += 1
            continue

        if ch == "#":
            break
        if ch in "\"'":
            triple = line[i : i + 3]
            state.quote = triple if triple in ('"""', "'''") else ch
            i += len(state.quote)
            code_end = i
            continue
        if ch in _OPENERS:
            before = (state.code_tail + " " + line[:i]) if not line[:i].strip() else line[:i]
            accepts = _accepts_trailing_comma(ch, before)
            state.stack.append(_Bracket(ch, line_index, lineno, accepts))
        elif ch in _CLOSERS:
            if not state.stack or _PAIRS[state.stack[-1].char] != ch:
                raise FormattingFailure(f"unbalanced '{ch}' on line {lineno}")
            bracket = state.stack.pop()
            if bracket.line_index < line_index:
                if (
                    bracket.accepts_trailing_comma
                    and code_end is not None
                    and code_end - 1 != hugging_close
                    and line[code_end - 1] not in _NO_COMMA_AFTER
                ):
                    line = line[:code_end] + "," + line[code_end:]
                    i += 1
                hugging_close = i
        if not ch.isspace():
            code_end = i + 1
        i += 1

    if state.quote is not None and len(state.quote) == 1 and not continued:
        raise FormattingFailure(f"unterminated string literal on line {lineno}")
    if code_end is not None:
        state.code_tail = line[:code_end]
    return line, code_end


def _accepts_trailing_comma(opener: str, before: str) -> bool:
    """
    Whether a trailing comma may follow the last element inside `opener`.

    Displays (`[...]`, `{...}`) and call argument lists accept one. Parenthesized
    expressions and subscripts do not: a comma would turn them into tuples.
    """
    if opener == "{":
        return True
    head = before.rstrip()
    name = _TRAILING_NAME_RE.search(head)
    follows_operand = (name is not None and not keyword.iskeyword(name.group())) or (
        bool(head) and head[-1] in ")]}\"'"
    )
    if opener == "(":
        return follows_operand
    return not follows_operand


def _insert_trailing_comma(
    out: list[str],
    code_ends: list[int | None],
    opener_index: int,
) -> None:
    """Add a comma after the last code on or after `opener_index`, unless one is present."""
    for j in range(len(out) - 1, opener_index - 1, -1):
        end = code_ends[j]
        if end is None:
            continue
        if out[j][end - 1] not in _NO_COMMA_AFTER:
            out[j] = out[j][:end] + "," + out[j][end:]
            code_ends[j] = end + 1
        return


# End of file: src/mstair/snapshot/render/code_formatter.py
