"""参考数据存储：系统字典、通知公告、系统配置与邮件发送记录。"""

from refdata.core.exceptions import (
    AppException,
    ConflictError,
    DisabledError,
    InvalidStateError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from refdata.core.logger import correlation_scope, setup_logging
from refdata.db.init_db import init_db
from refdata.store import ReferenceDataStore

__all__ = [
    "AppException",
    "ConflictError",
    "DisabledError",
    "InvalidStateError",
    "NotFoundError",
    "ReferenceDataStore",
    "StoreError",
    "ValidationError",
    "correlation_scope",
    "init_db",
    "setup_logging",
]
