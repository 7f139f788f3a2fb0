"""系统字典服务：提供统一的字典类型与字典项管理能力。"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from refdata.core.enums import EnabledStatusEnum
from refdata.core.exceptions import ConflictError, NotFoundError
from refdata.crud.dictionary import dict_data_crud
from refdata.crud.dictionary_type import dict_type_crud
from refdata.db.session import atomic
from refdata.models.dictionary import DictData, DictType
from refdata.schemas.common import PageData, enum_value, normalize_page, validate_payload
from refdata.schemas.dictionary import (
    DictDataCreate,
    DictDataDetail,
    DictDataUpdate,
    DictTypeCreate,
    DictTypeDetail,
    DictTypeUpdate,
)

logger = logging.getLogger(__name__)


class DictionaryService:
    """封装系统字典相关的业务逻辑。"""

    # ------------------------------------------------------------------
    # 字典类型管理
    # ------------------------------------------------------------------

    def create_type(
        self,
        db: Session,
        *,
        name: str,
        code: str,
        status: EnabledStatusEnum | str = EnabledStatusEnum.ENABLED,
        remark: Optional[str] = None,
    ) -> DictTypeDetail:
        """创建字典类型，编码重复时抛出 ``ConflictError``。"""
        payload = validate_payload(DictTypeCreate, name=name, code=code, status=status, remark=remark)

        with atomic(db):
            if dict_type_crud.get_by_code(db, payload.code) is not None:
                raise ConflictError(f"字典编码 {payload.code} 已存在")
            created = dict_type_crud.create(
                db,
                {
                    "name": payload.name,
                    "code": payload.code,
                    "status": payload.status.value,
                    "remark": payload.remark,
                },
                auto_commit=False,
            )
        logger.info("Created dict type %s (id=%s)", created.code, created.id)
        return DictTypeDetail.model_validate(created)

    def update_type(
        self,
        db: Session,
        *,
        type_id: int,
        name: Optional[str] = None,
        code: Optional[str] = None,
        status: Optional[EnabledStatusEnum | str] = None,
        remark: Optional[str] = None,
    ) -> DictTypeDetail:
        """更新字典类型；编码变更时在同一事务内同步字典项的冗余编码。"""
        payload = validate_payload(DictTypeUpdate, name=name, code=code, status=status, remark=remark)

        with atomic(db):
            dict_type = self._require_type(db, type_id, for_update=True)
            if payload.code is not None and payload.code != dict_type.code:
                if dict_type_crud.get_by_code(db, payload.code) is not None:
                    raise ConflictError(f"字典编码 {payload.code} 已存在")
                dict_type.code = payload.code
                restamped = dict_data_crud.restamp_type_code(db, type_id=dict_type.id, type_code=payload.code)
                logger.info("Re-stamped %s dict entries with code %s", restamped, payload.code)
            if payload.name is not None:
                dict_type.name = payload.name
            if payload.status is not None:
                dict_type.status = payload.status.value
            if payload.remark is not None:
                dict_type.remark = payload.remark.strip() or None
            dict_type_crud.save(db, dict_type, auto_commit=False)
        db.refresh(dict_type)
        return DictTypeDetail.model_validate(dict_type)

    def get_type(self, db: Session, type_id: int) -> DictTypeDetail:
        return DictTypeDetail.model_validate(self._require_type(db, type_id))

    def get_type_by_code(self, db: Session, code: str) -> DictTypeDetail:
        dict_type = dict_type_crud.get_by_code(db, code)
        if dict_type is None:
            raise NotFoundError(f"字典类型 {code} 不存在")
        return DictTypeDetail.model_validate(dict_type)

    def list_types(
        self,
        db: Session,
        *,
        keyword: Optional[str] = None,
        status: Optional[EnabledStatusEnum | str] = None,
        page: int = 1,
        size: int = 10,
    ) -> PageData[DictTypeDetail]:
        page, size, skip = normalize_page(page, size)
        items, total = dict_type_crud.list_with_filters(
            db,
            keyword=keyword,
            status=enum_value(EnabledStatusEnum, status),
            skip=skip,
            limit=size,
        )
        return PageData[DictTypeDetail](
            total=total,
            page=page,
            size=size,
            list=[DictTypeDetail.model_validate(item) for item in items],
        )

    def delete_type(self, db: Session, *, type_id: int) -> int:
        """删除字典类型及其下全部字典项（同一事务），返回删除的字典项数量。"""
        with atomic(db):
            dict_type = self._require_type(db, type_id, for_update=True)
            code = dict_type.code
            deleted_items = dict_data_crud.delete_by_types(db, type_ids=[dict_type.id])
            dict_type_crud.hard_delete(db, dict_type, auto_commit=False)
        logger.info("Deleted dict type %s with %s entries", code, deleted_items)
        return deleted_items

    def delete_types(self, db: Session, *, ids: Sequence[int]) -> int:
        """批量删除字典类型，字典项随之级联删除；不存在的 ID 忽略，返回删除的类型数量。"""
        id_list = list(ids)
        if not id_list:
            return 0
        with atomic(db):
            deleted_items = dict_data_crud.delete_by_types(db, type_ids=id_list)
            deleted = dict_type_crud.delete_by_ids(db, id_list)
        logger.info("Deleted %s dict types with %s entries", deleted, deleted_items)
        return deleted

    # ------------------------------------------------------------------
    # 字典项管理
    # ------------------------------------------------------------------

    def create_data(
        self,
        db: Session,
        *,
        label: str,
        value: str,
        type_id: int,
        sort_order: int = 0,
        is_default: bool = False,
        status: EnabledStatusEnum | str = EnabledStatusEnum.ENABLED,
        remark: Optional[str] = None,
    ) -> DictDataDetail:
        """在指定类型下新增字典项，``type_code`` 取自所属类型。"""
        payload = validate_payload(
            DictDataCreate,
            label=label,
            value=value,
            sort_order=sort_order,
            type_id=type_id,
            is_default=is_default,
            status=status,
            remark=remark,
        )

        with atomic(db):
            dict_type = self._require_type(db, payload.type_id, for_update=True)
            if dict_data_crud.get_by_value(db, type_id=dict_type.id, value=payload.value) is not None:
                raise ConflictError(f"字典值 {payload.value} 在类型 {dict_type.code} 下已存在")
            if payload.is_default:
                dict_data_crud.clear_default(db, type_id=dict_type.id)
            created = dict_data_crud.create(
                db,
                {
                    "label": payload.label,
                    "value": payload.value,
                    "sort_order": payload.sort_order,
                    "type_id": dict_type.id,
                    "type_code": dict_type.code,
                    "is_default": payload.is_default,
                    "status": payload.status.value,
                    "remark": payload.remark,
                },
                auto_commit=False,
            )
        logger.info("Created dict entry %s=%s under %s", created.label, created.value, created.type_code)
        return DictDataDetail.model_validate(created)

    def update_data(
        self,
        db: Session,
        *,
        data_id: int,
        label: Optional[str] = None,
        value: Optional[str] = None,
        sort_order: Optional[int] = None,
        is_default: Optional[bool] = None,
        status: Optional[EnabledStatusEnum | str] = None,
        remark: Optional[str] = None,
    ) -> DictDataDetail:
        """修改字典项；所属类型不可变更。"""
        payload = validate_payload(
            DictDataUpdate,
            label=label,
            value=value,
            sort_order=sort_order,
            is_default=is_default,
            status=status,
            remark=remark,
        )

        with atomic(db):
            entry = self._require_data(db, data_id, for_update=True)
            if payload.value is not None:
                new_value = payload.value
                duplicate = dict_data_crud.get_by_value(
                    db, type_id=entry.type_id, value=new_value, exclude_id=entry.id
                )
                if duplicate is not None:
                    raise ConflictError(f"字典值 {new_value} 在类型 {entry.type_code} 下已存在")
                entry.value = new_value
            if payload.label is not None:
                entry.label = payload.label
            if payload.sort_order is not None:
                entry.sort_order = payload.sort_order
            if payload.status is not None:
                entry.status = payload.status.value
            if payload.remark is not None:
                entry.remark = payload.remark.strip() or None
            if payload.is_default is not None:
                if payload.is_default:
                    dict_data_crud.clear_default(db, type_id=entry.type_id, exclude_id=entry.id)
                entry.is_default = payload.is_default
            dict_data_crud.save(db, entry, auto_commit=False)
        db.refresh(entry)
        return DictDataDetail.model_validate(entry)

    def delete_data(self, db: Session, *, data_id: int) -> None:
        with atomic(db):
            entry = self._require_data(db, data_id)
            dict_data_crud.hard_delete(db, entry, auto_commit=False)
        logger.info("Deleted dict entry id=%s", data_id)

    def delete_data_batch(self, db: Session, *, ids: Sequence[int]) -> int:
        with atomic(db):
            deleted = dict_data_crud.delete_by_ids(db, list(ids))
        logger.info("Deleted %s dict entries", deleted)
        return deleted

    def get_data(self, db: Session, data_id: int) -> DictDataDetail:
        return DictDataDetail.model_validate(self._require_data(db, data_id))

    def list_by_type_code(
        self,
        db: Session,
        *,
        type_code: str,
        status: Optional[EnabledStatusEnum | str] = None,
    ) -> List[DictDataDetail]:
        """返回某类型下的字典项，按排序值升序、ID 升序。"""
        if dict_type_crud.get_by_code(db, type_code) is None:
            raise NotFoundError(f"字典类型 {type_code} 不存在")
        items = dict_data_crud.list_by_type_code(
            db,
            type_code,
            status=enum_value(EnabledStatusEnum, status),
        )
        return [DictDataDetail.model_validate(item) for item in items]

    def page_data(
        self,
        db: Session,
        *,
        type_id: Optional[int] = None,
        type_code: Optional[str] = None,
        keyword: Optional[str] = None,
        status: Optional[EnabledStatusEnum | str] = None,
        page: int = 1,
        size: int = 10,
    ) -> PageData[DictDataDetail]:
        page, size, skip = normalize_page(page, size)
        items, total = dict_data_crud.list_with_filters(
            db,
            type_id=type_id,
            type_code=type_code,
            keyword=keyword,
            status=enum_value(EnabledStatusEnum, status),
            skip=skip,
            limit=size,
        )
        return PageData[DictDataDetail](
            total=total,
            page=page,
            size=size,
            list=[DictDataDetail.model_validate(item) for item in items],
        )

    def get_default(self, db: Session, *, type_code: str) -> Optional[DictDataDetail]:
        """返回该类型下启用状态的默认字典项，没有则为 ``None``。"""
        entry = dict_data_crud.get_default(db, type_code, status=EnabledStatusEnum.ENABLED.value)
        return DictDataDetail.model_validate(entry) if entry is not None else None

    # ------------------------------------------------------------------
    # 辅助方法
    # ------------------------------------------------------------------

    def _require_type(self, db: Session, type_id: int, *, for_update: bool = False) -> DictType:
        getter = dict_type_crud.get_for_update if for_update else dict_type_crud.get
        dict_type = getter(db, type_id)
        if dict_type is None:
            raise NotFoundError("字典类型不存在")
        return dict_type

    def _require_data(self, db: Session, data_id: int, *, for_update: bool = False) -> DictData:
        getter = dict_data_crud.get_for_update if for_update else dict_data_crud.get
        entry = getter(db, data_id)
        if entry is None:
            raise NotFoundError("字典数据不存在")
        return entry


dictionary_service = DictionaryService()
