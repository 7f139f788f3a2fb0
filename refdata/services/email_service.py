"""邮件发送记录服务：记录每次发送尝试及其最终结果。"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from refdata.core.enums import EmailStatusEnum
from refdata.core.exceptions import InvalidStateError, NotFoundError
from refdata.core.timezone import now
from refdata.crud.email_record import email_record_crud
from refdata.db.session import atomic
from refdata.schemas.common import PageData, enum_value, normalize_page, validate_payload
from refdata.schemas.email_record import EmailRecordDetail, EmailSend

logger = logging.getLogger(__name__)


class EmailService:
    def record_attempt(
        self,
        db: Session,
        *,
        to_email: str,
        subject: str,
        content: str,
        is_html: bool = False,
    ) -> EmailRecordDetail:
        """登记一次待发送的邮件，收件地址需为合法邮箱。"""
        payload = validate_payload(EmailSend, to_email=to_email, subject=subject, content=content, is_html=is_html)
        with atomic(db):
            record = email_record_crud.create(
                db,
                {
                    "to_email": str(payload.to_email),
                    "subject": payload.subject,
                    "content": payload.content,
                    "is_html": payload.is_html,
                    "status": EmailStatusEnum.PENDING.value,
                },
                auto_commit=False,
            )
        logger.info("Recorded email attempt id=%s to %s", record.id, record.to_email)
        return EmailRecordDetail.model_validate(record)

    def mark_sent(self, db: Session, *, record_id: int, send_time: Optional[datetime] = None) -> EmailRecordDetail:
        return self._finish(
            db,
            record_id,
            {
                "status": EmailStatusEnum.SENT.value,
                "send_time": send_time or now(),
                "error_msg": None,
            },
        )

    def mark_failed(self, db: Session, *, record_id: int, error_msg: str) -> EmailRecordDetail:
        return self._finish(
            db,
            record_id,
            {"status": EmailStatusEnum.FAILED.value, "error_msg": error_msg},
        )

    def _finish(self, db: Session, record_id: int, values: dict) -> EmailRecordDetail:
        # 待发送 -> 已发送/发送失败 只允许发生一次
        with atomic(db):
            hit = email_record_crud.finish_pending(db, id=record_id, values=values)
            if not hit:
                current = email_record_crud.get(db, record_id)
                if current is None:
                    raise NotFoundError("邮件记录不存在")
                raise InvalidStateError(
                    f"邮件记录已处于 {current.status} 状态，不能重复更新",
                    data={"status": current.status},
                )
        logger.info("Email record id=%s marked %s", record_id, values["status"])
        return self.get_record(db, record_id)

    def get_record(self, db: Session, record_id: int) -> EmailRecordDetail:
        record = email_record_crud.get(db, record_id)
        if record is None:
            raise NotFoundError("邮件记录不存在")
        return EmailRecordDetail.model_validate(record)

    def list_records(
        self,
        db: Session,
        *,
        to_email: Optional[str] = None,
        status: Optional[EmailStatusEnum | str] = None,
        page: int = 1,
        size: int = 10,
    ) -> PageData[EmailRecordDetail]:
        """按收件人与状态过滤，最近创建的记录在前。"""
        page, size, skip = normalize_page(page, size)
        items, total = email_record_crud.list_with_filters(
            db,
            to_email=to_email,
            status=enum_value(EmailStatusEnum, status),
            skip=skip,
            limit=size,
        )
        return PageData[EmailRecordDetail](
            total=total,
            page=page,
            size=size,
            list=[EmailRecordDetail.model_validate(item) for item in items],
        )


email_service = EmailService()
