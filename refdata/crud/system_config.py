"""系统配置的数据库访问方法。"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from refdata.crud.base import CRUDBase
from refdata.models.system_config import SystemConfig


class CRUDSystemConfig(CRUDBase[SystemConfig]):
    def get_by_key(self, db: Session, key: str, *, for_update: bool = False) -> Optional[SystemConfig]:
        query = self.query(db).filter(self.model.key == key)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def list_with_filters(
        self,
        db: Session,
        *,
        keyword: Optional[str] = None,
        config_type: Optional[str] = None,
        is_frontend_visible: Optional[bool] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[List[SystemConfig], int]:
        """按名称/键关键字、类型、前端可见性与状态过滤，按 ID 升序分页。"""
        query = self.query(db)
        if keyword:
            trimmed = keyword.strip()
            if trimmed:
                pattern = f"%{trimmed}%"
                query = query.filter(
                    or_(self.model.name.ilike(pattern), self.model.key.ilike(pattern))
                )
        if config_type is not None:
            query = query.filter(self.model.config_type == config_type)
        if is_frontend_visible is not None:
            query = query.filter(self.model.is_frontend_visible.is_(is_frontend_visible))
        if status is not None:
            query = query.filter(self.model.status == status)
        return self.paginate(query.order_by(self.model.id.asc()), skip=skip, limit=limit)

    def list_all(self, db: Session) -> List[SystemConfig]:
        return self.query(db).order_by(self.model.id.asc()).all()

    def list_frontend_visible(self, db: Session, *, status: str) -> List[SystemConfig]:
        return (
            self.query(db)
            .filter(self.model.is_frontend_visible.is_(True), self.model.status == status)
            .order_by(self.model.id.asc())
            .all()
        )

    def list_versions_by_ids(self, db: Session, ids: List[int]) -> List[Tuple[str, int]]:
        """返回 ``(key, version)`` 列表，供删除后写入缓存删除标记。"""
        if not ids:
            return []
        rows = db.query(self.model.key, self.model.version).filter(self.model.id.in_(ids)).all()
        return [(row[0], row[1]) for row in rows]


system_config_crud = CRUDSystemConfig(SystemConfig)

__all__ = ["system_config_crud"]
