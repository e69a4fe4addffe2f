# File: src/mstair/snapshot/xlogging/test_core_logger.py
"""
Tests for CoreLogger: TRACE level, prefixes, argument rendering, caller records,
root initialization, and the CoreFormatter.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator

import pytest

from mstair.snapshot.xlogging import core_logger
from mstair.snapshot.xlogging.core_logger import CoreLogger, initialize_root
from mstair.snapshot.xlogging.logger_constants import TRACE
from mstair.snapshot.xlogging.logger_factory import create_logger
from mstair.snapshot.xlogging.logger_formatter import CoreFormatter


@pytest.fixture
def log() -> CoreLogger:
    logger = create_logger("mstair.snapshot.tests.core_logger", level=TRACE)
    return logger


@pytest.fixture
def clean_logging() -> Iterator[None]:
    """Reset root logger state (handlers, level, init flag) around a test."""
    root = logging.getLogger()
    attr = core_logger._LOG_ROOT_ATTR_NAME
    prev_level = root.level
    prev_handlers = list(root.handlers)
    prev_attr = getattr(root, attr, None)

    root.handlers = []
    root.setLevel(logging.NOTSET)
    if hasattr(root, attr):
        delattr(root, attr)

    yield

    root.handlers = prev_handlers
    root.setLevel(prev_level)
    if prev_attr is not None:
        setattr(root, attr, prev_attr)
    elif hasattr(root, attr):
        delattr(root, attr)


@pytest.mark.unit
def test_create_logger_reuses_core_logger() -> None:
    first = create_logger("mstair.snapshot.tests.reuse")
    assert isinstance(first, CoreLogger)
    assert create_logger("mstair.snapshot.tests.reuse") is first
    assert logging.getLogger("mstair.snapshot.tests.reuse") is first


@pytest.mark.unit
def test_create_logger_defaults_to_caller_module() -> None:
    assert create_logger().name == __name__


@pytest.mark.unit
def test_trace_level(log: CoreLogger, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(TRACE, logger=log.name):
        log.trace("fine detail %d", 1)
    assert [(r.levelname, r.getMessage()) for r in caplog.records] == [("TRACE", "fine detail 1")]


@pytest.mark.unit
def test_prefixes_nest(log: CoreLogger, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger=log.name):
        with log.prefix_with("export"):
            with log.prefix_with("User"):
                log.info("written")
            log.info("done")
        log.info("plain")
    assert [r.getMessage() for r in caplog.records] == [
        "export > User > written",
        "export > done",
        "plain",
    ]


@pytest.mark.unit
def test_non_primitive_arguments_are_rendered(
    log: CoreLogger, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO, logger=log.name):
        log.info("value %s", {"b": 1, "a": 2})
        log.info("lock %s", threading.Lock())
    rendered, unrenderable = (r.getMessage() for r in caplog.records)
    assert rendered == 'value {\n    "a": 2,\n    "b": 1,\n}'
    assert unrenderable.startswith("lock <unrenderable lock: Unsupported type")


@pytest.mark.unit
def test_extra_keywords_and_caller(log: CoreLogger, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger=log.name):
        log.info("with extra", request_id=7)
    (record,) = caplog.records
    assert record.request_id == 7  # type: ignore[attr-defined]
    assert record.funcName == "test_extra_keywords_and_caller"


@pytest.mark.unit
def test_initialize_root_is_idempotent(clean_logging: None) -> None:
    initialize_root()
    initialize_root()
    root = logging.getLogger()
    core_handlers = [h for h in root.handlers if isinstance(h.formatter, CoreFormatter)]
    assert len(core_handlers) == 1
    assert root.level == logging.WARNING

    initialize_root(level="debug", force=True)
    assert len([h for h in root.handlers if isinstance(h.formatter, CoreFormatter)]) == 1
    assert root.level == logging.DEBUG


@pytest.mark.unit
def test_formatter_fields_and_time_zone(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NO_COLOR", "1")
    formatter = CoreFormatter("%(levelName)s %(method)s %(message)s", tz_name="Europe/Paris")
    record = logging.LogRecord("x", logging.INFO, __file__, 10, "hello", None, None, "fn")
    assert formatter.format(record) == "INFO fn() hello"

    record.created = 0.0
    assert formatter.formatTime(record) == "1970-01-01T01:00:00+01:00"


@pytest.mark.unit
def test_formatter_unknown_zone_falls_back_to_utc(capsys: pytest.CaptureFixture[str]) -> None:
    formatter = CoreFormatter(tz_name="Not/AZone")
    assert formatter.tz.zone == "UTC"
    assert "Not/AZone" in capsys.readouterr().err


# End of file: src/mstair/snapshot/xlogging/test_core_logger.py
