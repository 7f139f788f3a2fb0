"""通知公告的数据库访问方法。"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence, Tuple

from sqlalchemy import update
from sqlalchemy.orm import Query, Session

from refdata.crud.base import CRUDBase
from refdata.models.notice import Notice


class CRUDNotice(CRUDBase[Notice]):
    def filtered(
        self,
        db: Session,
        *,
        status: Optional[str] = None,
        is_top: Optional[bool] = None,
        notice_type: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> Query:
        """构造带过滤条件的查询，排序：置顶优先，其次发布时间倒序，最后 ID 倒序。"""
        query = self.query(db)
        if status is not None:
            query = query.filter(self.model.status == status)
        if is_top is not None:
            query = query.filter(self.model.is_top.is_(is_top))
        if notice_type is not None:
            query = query.filter(self.model.notice_type == notice_type)
        if keyword:
            trimmed = keyword.strip()
            if trimmed:
                query = query.filter(self.model.title.ilike(f"%{trimmed}%"))
        return query.order_by(
            self.model.is_top.desc(),
            self.model.publish_time.desc().nulls_last(),
            self.model.id.desc(),
        )

    def list_with_filters(self, db: Session, **filters: Any) -> List[Notice]:
        return self.filtered(db, **filters).all()

    def page_with_filters(
        self, db: Session, *, skip: int, limit: int, **filters: Any
    ) -> Tuple[List[Notice], int]:
        return self.paginate(self.filtered(db, **filters), skip=skip, limit=limit)

    def transition(
        self,
        db: Session,
        *,
        id: int,
        from_statuses: Sequence[str],
        values: dict[str, Any],
    ) -> bool:
        """比较并设置：仅当当前状态属于 ``from_statuses`` 时更新，返回是否命中（不提交）。

        单条 ``UPDATE ... WHERE status IN (...)`` 保证并发调用方中只有一个能完成迁移。
        """
        stmt = (
            update(self.model)
            .where(self.model.id == id, self.model.status.in_(list(from_statuses)))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = db.execute(stmt)
        return result.rowcount == 1


notice_crud = CRUDNotice(Notice)

__all__ = ["notice_crud"]
