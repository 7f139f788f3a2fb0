"""枚举定义：约束各类参考数据的状态与类型取值。"""

from enum import Enum


class EnabledStatusEnum(str, Enum):
    """字典类型、字典项与系统配置共用的启停状态。"""

    ENABLED = "enabled"
    DISABLED = "disabled"


class NoticeTypeEnum(str, Enum):
    NOTICE = "notice"
    ANNOUNCEMENT = "announcement"


class NoticeLevelEnum(str, Enum):
    """公告重要程度。"""

    NORMAL = "normal"
    IMPORTANT = "important"
    URGENT = "urgent"


class NoticeStatusEnum(str, Enum):
    """公告发布状态：草稿 -> 已发布 -> 已撤回，撤回后不可再次发布。"""

    DRAFT = "draft"
    PUBLISHED = "published"
    WITHDRAWN = "withdrawn"


class ConfigTypeEnum(str, Enum):
    """系统配置值的语义类型，值本身始终以文本存储。"""

    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    JSON = "json"
    ARRAY = "array"


class EmailStatusEnum(str, Enum):
    """邮件发送记录状态：待发送只能迁移一次到成功或失败。"""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
