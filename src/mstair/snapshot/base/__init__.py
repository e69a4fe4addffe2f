"""
package: mstair.snapshot.base
"""

# <AUTOGEN_INIT>
from mstair.snapshot.base import (
    caller_info,
    config,
    constants,
    fs_helpers,
    string_helpers,
    types,
)


__all__ = [
    "caller_info",
    "config",
    "constants",
    "fs_helpers",
    "string_helpers",
    "types",
]
# </AUTOGEN_INIT>
