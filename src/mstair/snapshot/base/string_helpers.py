# File: src/mstair/snapshot/base/string_helpers.py

from __future__ import annotations

import hashlib
import keyword
import re
from typing import Final


__all__ = [
    "text_digest",
    "to_identifier",
]

_NON_IDENTIFIER_CHAR_RE: Final[re.Pattern[str]] = re.compile(r"\W", re.UNICODE)


def text_digest(text: str, num_chars: int = 12) -> str:
    """
    Return the leading `num_chars` hex digits of the SHA-256 of `text`.

    :param text: Text to digest (encoded as UTF-8).
    :param num_chars: Number of hex digits to keep; values <= 0 keep the full digest.
    :return str: Lowercase hex digest prefix.
    """
    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()
    if 0 < num_chars < len(digest):
        digest = digest[:num_chars]
    return digest


def to_identifier(name: str) -> str:
    """
    Coerce arbitrary text into a valid, non-keyword Python identifier.

    - Characters that cannot appear in an identifier become underscores.
    - Empty or all-underscore names collapse to a single underscore.
    - A leading digit gets an underscore prefix.
    - Keywords and soft keywords get a trailing underscore (`class` -> `class_`).
    """
    result = _NON_IDENTIFIER_CHAR_RE.sub("_", name)
    if not result or set(result) == {"_"}:
        return "_"
    if result[0].isdigit():
        result = "_" + result
    if keyword.iskeyword(result) or keyword.issoftkeyword(result):
        result += "_"
    return result


# End of file: src/mstair/snapshot/base/string_helpers.py
