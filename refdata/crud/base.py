"""CRUD 基类：为各实体提供通用的数据访问方法。"""

from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from refdata.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    """封装常见的查询、创建与保存逻辑，减少重复代码。

    ``auto_commit=False`` 时只 flush 不提交，由服务层在 ``atomic`` 事务中统一提交。
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return self.query(db).filter(self.model.id == id).first()

    def get_for_update(self, db: Session, id: Any) -> Optional[ModelType]:
        """带行锁读取（SQLite 下退化为普通读取）。"""
        return self.query(db).filter(self.model.id == id).with_for_update().first()

    def create(self, db: Session, obj_in: Dict[str, Any], *, auto_commit: bool = True) -> ModelType:
        db_obj = self.model(**obj_in)
        db.add(db_obj)
        self._finish(db, db_obj, auto_commit)
        return db_obj

    def save(self, db: Session, db_obj: ModelType, *, auto_commit: bool = True) -> ModelType:
        db.add(db_obj)
        self._finish(db, db_obj, auto_commit)
        return db_obj

    def hard_delete(self, db: Session, db_obj: ModelType, *, auto_commit: bool = True) -> None:
        """物理删除行。"""
        db.delete(db_obj)
        if auto_commit:
            try:
                db.commit()
            except Exception:
                db.rollback()
                raise
        else:
            db.flush()

    def delete_by_ids(self, db: Session, ids: List[int]) -> int:
        """批量物理删除，返回受影响行数（不提交）。"""
        if not ids:
            return 0
        result = (
            db.query(self.model)
            .filter(self.model.id.in_(ids))
            .delete(synchronize_session=False)
        )
        return int(result or 0)

    def query(self, db: Session) -> Query:
        return db.query(self.model)

    def count(self, query: Query) -> int:
        counted = query.order_by(None).with_entities(func.count(self.model.id))
        return int(counted.scalar() or 0)

    def paginate(self, query: Query, *, skip: int, limit: int) -> Tuple[List[ModelType], int]:
        """返回 ``(当前页数据, 总数)``；调用方需先设置排序。"""
        total = self.count(query)
        items = query.offset(max(skip, 0)).limit(max(limit, 1)).all()
        return items, total

    @staticmethod
    def _finish(db: Session, db_obj: Any, auto_commit: bool) -> None:
        if auto_commit:
            db.commit()
            db.refresh(db_obj)
        else:
            db.flush()
