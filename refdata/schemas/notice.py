"""通知公告相关的请求与读模型。"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from refdata.core.enums import NoticeLevelEnum, NoticeStatusEnum, NoticeTypeEnum
from refdata.schemas.common import DetailModel


class NoticeCreate(BaseModel):
    """新建公告；状态固定为草稿，发布需单独调用。"""

    title: str = Field(..., min_length=1, max_length=128)
    content: str = Field(..., min_length=1, max_length=50000)
    notice_type: NoticeTypeEnum = NoticeTypeEnum.NOTICE
    level: NoticeLevelEnum = NoticeLevelEnum.NORMAL
    is_top: bool = False

    @field_validator("title")
    @classmethod
    def _normalize_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("公告标题不能为空")
        return value


class NoticeUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=128)
    content: Optional[str] = Field(default=None, min_length=1, max_length=50000)
    notice_type: Optional[NoticeTypeEnum] = None
    level: Optional[NoticeLevelEnum] = None
    is_top: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def _normalize_title(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("公告标题不能为空")
        return value


class NoticeDetail(DetailModel):
    id: int
    title: str
    content: str
    notice_type: NoticeTypeEnum
    level: NoticeLevelEnum
    is_top: bool
    status: NoticeStatusEnum
    publish_time: Optional[datetime] = None
    publisher_id: Optional[int] = None
    update_time: Optional[datetime] = None
