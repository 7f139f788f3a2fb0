"""邮件发送记录模型。"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from refdata.core.enums import EmailStatusEnum
from refdata.models.base import Base, CreateTimeMixin, status_check


class EmailRecord(CreateTimeMixin, Base):
    """一次邮件发送尝试；实际投递由外部发送器完成并回写结果。"""

    __tablename__ = "sys_email_record"
    __table_args__ = (
        CheckConstraint(status_check("status", EmailStatusEnum), name="status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    to_email: Mapped[str] = mapped_column(String(255), index=True)
    subject: Mapped[str] = mapped_column(String(255))
    content: Mapped[str] = mapped_column(Text)
    is_html: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[str] = mapped_column(
        String(16), default=EmailStatusEnum.PENDING.value, index=True
    )
    error_msg: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    send_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
