# File: src/mstair/snapshot/base/constants.py

from __future__ import annotations

from typing import Final


DEFAULT_INDENT: Final[int] = 4

# Environment variable names

K_SNAPSHOT_ROOT: Final[str] = "MSTAIR_SNAPSHOT_ROOT"
K_SNAPSHOT_HEADER: Final[str] = "MSTAIR_SNAPSHOT_HEADER"
K_LOG_TZ: Final[str] = "LOG_TZ"

# Output conventions

DEFAULT_SNAPSHOT_DIRNAME: Final[str] = "__snapshots__"
SNAPSHOT_FILE_SUFFIX: Final[str] = ".py"
PATH_SEPARATOR: Final[str] = " → "
DEFAULT_MASK_TEXT: Final[str] = "•••"
HASH_DIGEST_CHARS: Final[int] = 12


# End of file: src/mstair/snapshot/base/constants.py
