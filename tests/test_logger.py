from __future__ import annotations

import json
import logging
from logging.handlers import TimedRotatingFileHandler

import pytest

from refdata import correlation_scope, setup_logging
from refdata.core.config import Settings
from refdata.core.logger import CorrelationIdFilter, JsonFormatter, get_correlation_id, logger
from refdata.store import ReferenceDataStore

_CONFIGURED_LOGGERS = ("refdata", "sqlalchemy.engine", None)


@pytest.fixture()
def restore_logging():
    """``setup_logging`` 会改写全局日志配置，用例结束后还原，避免影响 caplog。"""
    saved = {}
    for name in _CONFIGURED_LOGGERS:
        target = logging.getLogger(name)
        saved[name] = (list(target.handlers), target.level, target.propagate)
    yield
    for name, (handlers, level, propagate) in saved.items():
        target = logging.getLogger(name)
        for handler in target.handlers:
            if handler not in handlers:
                handler.close()
        target.handlers = handlers
        target.setLevel(level)
        target.propagate = propagate


def _file_handler() -> TimedRotatingFileHandler:
    return next(h for h in logger.handlers if isinstance(h, TimedRotatingFileHandler))


def test_json_formatter_carries_correlation_id():
    record = logging.LogRecord("refdata.test", logging.INFO, __file__, 1, "created %s", ("notice",), None)
    with correlation_scope("req-42"):
        CorrelationIdFilter().filter(record)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["msg"] == "created notice"
    assert payload["level"] == "INFO"
    assert payload["correlation_id"] == "req-42"


def test_correlation_scope_restores_previous_value():
    with correlation_scope("outer"):
        with correlation_scope("inner"):
            assert get_correlation_id() == "inner"
        assert get_correlation_id() == "outer"
    assert get_correlation_id() is None


def test_setup_logging_installs_console_and_file_handlers(tmp_path, restore_logging):
    setup_logging(Settings(LOG_DIR=str(tmp_path), LOG_LEVEL="INFO"))

    assert logger.propagate is False
    assert logger.level == logging.INFO
    assert {type(handler) for handler in logger.handlers} == {logging.StreamHandler, TimedRotatingFileHandler}
    for handler in logger.handlers:
        assert any(isinstance(f, CorrelationIdFilter) for f in handler.filters)
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    with correlation_scope("req-7"):
        logger.info("dictionary loaded")
    logger.info("no request bound")
    _file_handler().flush()

    lines = (tmp_path / "refdata.log").read_text(encoding="utf-8").splitlines()
    assert lines[-2].endswith("- refdata - INFO - [req-7] dictionary loaded")
    assert lines[-1].endswith("- refdata - INFO - [-] no request bound")


def test_setup_logging_writes_json_lines_when_enabled(tmp_path, restore_logging):
    setup_logging(Settings(LOG_DIR=str(tmp_path), LOG_JSON=True))

    with correlation_scope("req-8"):
        logger.warning("cache unavailable")
    logger.warning("background refresh")
    _file_handler().flush()

    records = [json.loads(line) for line in (tmp_path / "refdata.log").read_text(encoding="utf-8").splitlines()]
    assert records[-2]["msg"] == "cache unavailable"
    assert records[-2]["correlation_id"] == "req-8"
    assert records[-1]["correlation_id"] is None


def test_mutations_emit_info_logs(store: ReferenceDataStore, caplog):
    with caplog.at_level(logging.INFO, logger="refdata"):
        store.create_dict_type("优先级", "priority_level")
        store.upsert_config("system.version", "1.0.0", "text")

    messages = [record.getMessage() for record in caplog.records]
    assert any("priority_level" in message for message in messages)
    assert any("system.version" in message for message in messages)
