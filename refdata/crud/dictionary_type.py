"""字典类型的数据库访问方法。"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from refdata.crud.base import CRUDBase
from refdata.models.dictionary import DictType


class CRUDDictType(CRUDBase[DictType]):
    """提供字典类型的常见查询与操作。"""

    def get_by_code(self, db: Session, code: str) -> Optional[DictType]:
        return self.query(db).filter(self.model.code == code).first()

    def list_with_filters(
        self,
        db: Session,
        *,
        keyword: Optional[str] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[List[DictType], int]:
        """按照关键字（匹配编码或名称）与状态返回分页后的字典类型。"""
        query = self.query(db)

        if keyword:
            trimmed = keyword.strip()
            if trimmed:
                pattern = f"%{trimmed}%"
                query = query.filter(
                    or_(
                        self.model.code.ilike(pattern),
                        self.model.name.ilike(pattern),
                    )
                )
        if status is not None:
            query = query.filter(self.model.status == status)

        query = query.order_by(self.model.id.asc())
        return self.paginate(query, skip=skip, limit=limit)


dict_type_crud = CRUDDictType(DictType)

__all__ = ["dict_type_crud"]
