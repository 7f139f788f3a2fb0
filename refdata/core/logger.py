"""存储层日志：``refdata`` 命名空间下的统一格式、关联 ID 注入与文件滚动输出。

库本身不会在导入时改动全局日志配置，宿主进程在启动阶段调用 ``setup_logging()`` 一次即可，
例如 HTTP 服务在创建应用实例之前调用。
"""

from __future__ import annotations

import json
import logging
import logging.config
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, tzinfo
from typing import Any, Dict, Iterator, Optional

from .config import Settings, get_settings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"

# 未设置关联 ID 时文本日志中的占位符
NO_CORRELATION_ID = "-"

_correlation_id_ctx: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


class _TZFormatter(logging.Formatter):
    """按配置时区渲染时间戳；未指定 ``datefmt`` 时输出带毫秒的 ISO-8601。"""

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        style: str = "%",
        tz: Optional[tzinfo] = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self.tz = tz

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: D401
        dt = datetime.fromtimestamp(record.created, self.tz or get_settings().timezone_info)
        if datefmt:
            return dt.strftime(datefmt)
        return dt.isoformat(sep=" ", timespec="milliseconds")


class ColorFormatter(_TZFormatter):
    """控制台格式化器，终端支持时按级别着色。"""

    RESET = "\033[0m"
    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[41m",
    }

    def __init__(self, *args: Any, use_colors: Optional[bool] = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.use_colors = sys.stderr.isatty() if use_colors is None else use_colors

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = self.COLORS.get(record.levelno) if self.use_colors else None
        return f"{color}{message}{self.RESET}" if color else message


class JsonFormatter(_TZFormatter):
    """每条记录输出一行 JSON，便于采集端解析。"""

    def format(self, record: logging.LogRecord) -> str:
        correlation_id = getattr(record, "correlation_id", None)
        payload = {
            "ts": self.formatTime(record),
            "logger": record.name,
            "level": record.levelname,
            "msg": record.getMessage(),
            "correlation_id": None if correlation_id == NO_CORRELATION_ID else correlation_id,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class CorrelationIdFilter(logging.Filter):
    """把当前上下文的关联 ID 写入每条记录的 ``correlation_id`` 属性。"""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.correlation_id = _correlation_id_ctx.get() or NO_CORRELATION_ID
        return True


def build_logging_config(settings: Settings) -> Dict[str, Any]:
    """生成 ``dictConfig`` 配置：控制台输出加按天滚动的文件输出。"""
    tz = settings.timezone_info
    console_formatter = "json" if settings.log_json else "console"
    handlers = ["console", "file"]
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"()": ColorFormatter, "format": TEXT_FORMAT, "tz": tz},
            "plain": {"()": _TZFormatter, "format": TEXT_FORMAT, "tz": tz},
            "json": {"()": JsonFormatter, "tz": tz},
        },
        "filters": {"correlation_id": {"()": CorrelationIdFilter}},
        "handlers": {
            "console": {
                "level": settings.log_level,
                "class": "logging.StreamHandler",
                "formatter": console_formatter,
                "filters": ["correlation_id"],
            },
            "file": {
                "level": settings.log_level,
                "class": "logging.handlers.TimedRotatingFileHandler",
                "formatter": "json" if settings.log_json else "plain",
                "filename": str(settings.log_file_path),
                "when": "midnight",
                "backupCount": 14,
                "encoding": "utf-8",
                "delay": True,
                "filters": ["correlation_id"],
            },
        },
        "loggers": {
            "refdata": {"handlers": handlers, "level": settings.log_level, "propagate": False},
            # SQL 语句日志仅在 DATABASE_ECHO 打开时输出
            "sqlalchemy.engine": {
                "handlers": handlers,
                "level": "INFO" if settings.database_echo else "WARNING",
                "propagate": False,
            },
        },
        "root": {"handlers": ["console"], "level": settings.log_level},
    }


def setup_logging(settings: Optional[Settings] = None) -> None:
    """按配置初始化日志，宿主进程启动时调用一次。"""
    settings = settings or get_settings()
    settings.log_directory.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(settings))
    logger.debug("Logging configured (level=%s, file=%s)", settings.log_level, settings.log_file_path)


logger = logging.getLogger("refdata")


def set_correlation_id(correlation_id: Optional[str]) -> None:
    _correlation_id_ctx.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    return _correlation_id_ctx.get()


@contextmanager
def correlation_scope(correlation_id: Optional[str]) -> Iterator[None]:
    """在 ``with`` 块内使用给定的关联 ID，退出后恢复原值。"""
    token = _correlation_id_ctx.set(correlation_id)
    try:
        yield
    finally:
        _correlation_id_ctx.reset(token)
