"""邮件发送记录的数据库访问方法。"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.orm import Session

from refdata.core.enums import EmailStatusEnum
from refdata.crud.base import CRUDBase
from refdata.models.email_record import EmailRecord


class CRUDEmailRecord(CRUDBase[EmailRecord]):
    def list_with_filters(
        self,
        db: Session,
        *,
        to_email: Optional[str] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[List[EmailRecord], int]:
        query = self.query(db)
        if to_email:
            trimmed = to_email.strip()
            if trimmed:
                query = query.filter(self.model.to_email.ilike(f"%{trimmed}%"))
        if status is not None:
            query = query.filter(self.model.status == status)
        query = query.order_by(self.model.create_time.desc(), self.model.id.desc())
        return self.paginate(query, skip=skip, limit=limit)

    def finish_pending(self, db: Session, *, id: int, values: dict[str, Any]) -> bool:
        """仅当记录仍为待发送时写入终态，返回是否命中（不提交）。"""
        stmt = (
            update(self.model)
            .where(self.model.id == id, self.model.status == EmailStatusEnum.PENDING.value)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return db.execute(stmt).rowcount == 1


email_record_crud = CRUDEmailRecord(EmailRecord)

__all__ = ["email_record_crud"]
