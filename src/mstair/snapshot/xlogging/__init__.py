"""
package: mstair.snapshot.xlogging
"""

# <AUTOGEN_INIT>
from mstair.snapshot.xlogging import (
    core_logger,
    logger_constants,
    logger_factory,
    logger_formatter,
    logger_util,
)
from mstair.snapshot.xlogging.core_logger import CoreLogger, initialize_root
from mstair.snapshot.xlogging.logger_constants import TRACE
from mstair.snapshot.xlogging.logger_factory import create_logger


__all__ = [
    "TRACE",
    "CoreLogger",
    "core_logger",
    "create_logger",
    "initialize_root",
    "logger_constants",
    "logger_factory",
    "logger_formatter",
    "logger_util",
]
# </AUTOGEN_INIT>
