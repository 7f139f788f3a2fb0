"""模型包初始化，便于统一导入 ORM 实体并触发模型注册。"""

from refdata.models.base import Base
from refdata.models.dictionary import DictData, DictType
from refdata.models.email_record import EmailRecord
from refdata.models.notice import Notice
from refdata.models.system_config import SystemConfig

__all__ = [
    "Base",
    "DictData",
    "DictType",
    "EmailRecord",
    "Notice",
    "SystemConfig",
]
