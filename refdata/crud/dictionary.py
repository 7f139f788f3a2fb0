"""字典项的数据库访问方法。"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from refdata.crud.base import CRUDBase
from refdata.models.dictionary import DictData


class CRUDDictData(CRUDBase[DictData]):
    """提供按类型查询与维护字典项的能力。"""

    def _ordered(self, query: Query) -> Query:
        return query.order_by(self.model.sort_order.asc(), self.model.id.asc())

    def list_by_type_code(
        self,
        db: Session,
        type_code: str,
        *,
        status: Optional[str] = None,
    ) -> List[DictData]:
        """按照类型编码返回排序后的字典项列表。"""
        query = self.query(db).filter(self.model.type_code == type_code)
        if status is not None:
            query = query.filter(self.model.status == status)
        return self._ordered(query).all()

    def list_with_filters(
        self,
        db: Session,
        *,
        type_id: Optional[int] = None,
        type_code: Optional[str] = None,
        keyword: Optional[str] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[List[DictData], int]:
        """根据类型、状态与搜索关键字返回分页后的字典项列表。"""
        query = self.query(db)
        if type_id is not None:
            query = query.filter(self.model.type_id == type_id)
        if type_code is not None:
            query = query.filter(self.model.type_code == type_code)
        if status is not None:
            query = query.filter(self.model.status == status)
        if keyword:
            trimmed = keyword.strip()
            if trimmed:
                pattern = f"%{trimmed}%"
                query = query.filter(
                    or_(
                        self.model.label.ilike(pattern),
                        self.model.value.ilike(pattern),
                    )
                )
        return self.paginate(self._ordered(query), skip=skip, limit=limit)

    def get_by_value(
        self,
        db: Session,
        *,
        type_id: int,
        value: str,
        exclude_id: Optional[int] = None,
    ) -> Optional[DictData]:
        """按照类型与值查询字典项，可排除指定 ID。"""
        query = self.query(db).filter(
            self.model.type_id == type_id,
            self.model.value == value,
        )
        if exclude_id is not None:
            query = query.filter(self.model.id != exclude_id)
        return query.first()

    def get_default(self, db: Session, type_code: str, *, status: Optional[str] = None) -> Optional[DictData]:
        query = self.query(db).filter(
            self.model.type_code == type_code,
            self.model.is_default.is_(True),
        )
        if status is not None:
            query = query.filter(self.model.status == status)
        return self._ordered(query).first()

    def clear_default(self, db: Session, *, type_id: int, exclude_id: Optional[int] = None) -> int:
        """取消同一类型下其它字典项的默认标记，返回受影响数量（不提交）。"""
        query = db.query(self.model).filter(
            self.model.type_id == type_id,
            self.model.is_default.is_(True),
        )
        if exclude_id is not None:
            query = query.filter(self.model.id != exclude_id)
        return int(query.update({self.model.is_default: False}, synchronize_session=False) or 0)

    def restamp_type_code(self, db: Session, *, type_id: int, type_code: str) -> int:
        """类型编码变更后同步冗余的 ``type_code`` 字段（不提交）。"""
        result = (
            db.query(self.model)
            .filter(self.model.type_id == type_id)
            .update({self.model.type_code: type_code}, synchronize_session=False)
        )
        return int(result or 0)

    def delete_by_types(self, db: Session, *, type_ids: List[int]) -> int:
        """删除指定类型下的全部字典项，返回受影响数量（不提交）。"""
        if not type_ids:
            return 0
        result = (
            db.query(self.model)
            .filter(self.model.type_id.in_(type_ids))
            .delete(synchronize_session=False)
        )
        return int(result or 0)


dict_data_crud = CRUDDictData(DictData)

__all__ = ["dict_data_crud"]
