"""通知公告模型。"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from refdata.core.enums import NoticeLevelEnum, NoticeStatusEnum, NoticeTypeEnum
from refdata.models.base import Base, TimestampMixin, status_check


class Notice(TimestampMixin, Base):
    """管理员发布的通知公告，具备 草稿 -> 发布 -> 撤回 的生命周期。"""

    __tablename__ = "sys_notice"
    __table_args__ = (
        CheckConstraint(status_check("status", NoticeStatusEnum), name="status"),
        CheckConstraint(status_check("notice_type", NoticeTypeEnum), name="notice_type"),
        CheckConstraint(status_check("level", NoticeLevelEnum), name="level"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(128))
    content: Mapped[str] = mapped_column(Text)  # 富文本
    notice_type: Mapped[str] = mapped_column(String(16), default=NoticeTypeEnum.NOTICE.value)
    level: Mapped[str] = mapped_column(String(16), default=NoticeLevelEnum.NORMAL.value)
    is_top: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    status: Mapped[str] = mapped_column(
        String(16), default=NoticeStatusEnum.DRAFT.value, index=True
    )
    publish_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    publisher_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
