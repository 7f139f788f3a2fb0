"""系统配置相关的请求与读模型。"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from refdata.core.enums import ConfigTypeEnum, EnabledStatusEnum
from refdata.schemas.common import DetailModel

_KEY_PATTERN = re.compile(r"^[a-zA-Z0-9._]+$")


class ConfigUpsert(BaseModel):
    """写入配置：键存在则原地更新，否则新建。"""

    key: str = Field(..., min_length=1, max_length=64)
    value: str = Field(..., max_length=10000)
    config_type: ConfigTypeEnum = ConfigTypeEnum.TEXT
    is_frontend_visible: bool = False
    remark: Optional[str] = None
    name: Optional[str] = Field(default=None, max_length=64)

    @field_validator("key")
    @classmethod
    def _validate_key(cls, value: str) -> str:
        value = value.strip()
        if not _KEY_PATTERN.fullmatch(value):
            raise ValueError("配置键只能包含字母、数字、点和下划线")
        return value


class ConfigDetail(DetailModel):
    id: int
    name: str
    key: str
    value: str
    config_type: ConfigTypeEnum
    is_frontend_visible: bool
    status: EnabledStatusEnum
    remark: Optional[str] = None
    update_time: Optional[datetime] = None
