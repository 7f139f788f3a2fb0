"""邮件发送记录相关的请求与读模型。"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from refdata.core.enums import EmailStatusEnum
from refdata.schemas.common import DetailModel


class EmailSend(BaseModel):
    to_email: EmailStr
    subject: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1, max_length=100000)
    is_html: bool = False


class EmailRecordDetail(DetailModel):
    id: int
    to_email: str
    subject: str
    content: str
    is_html: bool
    status: EmailStatusEnum
    error_msg: Optional[str] = None
    send_time: Optional[datetime] = None
