"""统一时钟：发布时间、发送时间与读模型中的时间都以配置时区为准。"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from refdata.core.config import get_settings

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def now() -> datetime:
    return datetime.now(get_settings().timezone_info)


def format_datetime(value: Optional[datetime], fmt: str = DATETIME_FORMAT) -> Optional[str]:
    """格式化为配置时区的字符串。

    SQLite 读回的时间不带时区信息，此时视为已是配置时区的本地时间。
    """
    if value is None:
        return None
    zone = get_settings().timezone_info
    local = value.replace(tzinfo=zone) if value.tzinfo is None else value.astimezone(zone)
    return local.strftime(fmt)
