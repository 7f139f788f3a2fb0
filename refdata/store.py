"""参考数据存储门面：每次调用在独立会话与事务中委托给对应的服务。

HTTP 层或其它调用方只需持有一个 ``ReferenceDataStore`` 实例，不必关心会话管理。
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from refdata.core.enums import (
    ConfigTypeEnum,
    EmailStatusEnum,
    EnabledStatusEnum,
    NoticeLevelEnum,
    NoticeStatusEnum,
    NoticeTypeEnum,
)
from refdata.db import session as db_session
from refdata.schemas.common import PageData
from refdata.schemas.dictionary import DictDataDetail, DictTypeDetail
from refdata.schemas.email_record import EmailRecordDetail
from refdata.schemas.notice import NoticeDetail
from refdata.schemas.system_config import ConfigDetail
from refdata.services.config_service import config_service
from refdata.services.dictionary_service import dictionary_service
from refdata.services.email_service import email_service
from refdata.services.notice_service import notice_service


class ReferenceDataStore:
    # ------------------------------------------------------------------
    # 字典
    # ------------------------------------------------------------------

    def create_dict_type(
        self,
        name: str,
        code: str,
        status: EnabledStatusEnum | str = EnabledStatusEnum.ENABLED,
        remark: Optional[str] = None,
    ) -> DictTypeDetail:
        with db_session.session_scope() as db:
            return dictionary_service.create_type(db, name=name, code=code, status=status, remark=remark)

    def update_dict_type(
        self,
        type_id: int,
        *,
        name: Optional[str] = None,
        code: Optional[str] = None,
        status: Optional[EnabledStatusEnum | str] = None,
        remark: Optional[str] = None,
    ) -> DictTypeDetail:
        with db_session.session_scope() as db:
            return dictionary_service.update_type(
                db, type_id=type_id, name=name, code=code, status=status, remark=remark
            )

    def get_dict_type(self, type_id: int) -> DictTypeDetail:
        with db_session.session_scope() as db:
            return dictionary_service.get_type(db, type_id)

    def get_dict_type_by_code(self, code: str) -> DictTypeDetail:
        with db_session.session_scope() as db:
            return dictionary_service.get_type_by_code(db, code)

    def list_dict_types(
        self,
        *,
        keyword: Optional[str] = None,
        status: Optional[EnabledStatusEnum | str] = None,
        page: int = 1,
        size: int = 10,
    ) -> PageData[DictTypeDetail]:
        with db_session.session_scope() as db:
            return dictionary_service.list_types(db, keyword=keyword, status=status, page=page, size=size)

    def delete_dict_type(self, type_id: int) -> int:
        """删除字典类型及其全部字典项，返回被删除的字典项数量。"""
        with db_session.session_scope() as db:
            return dictionary_service.delete_type(db, type_id=type_id)

    def delete_dict_types(self, ids: Sequence[int]) -> int:
        """批量删除字典类型（含其字典项），返回被删除的类型数量。"""
        with db_session.session_scope() as db:
            return dictionary_service.delete_types(db, ids=ids)

    def create_dict_data(
        self,
        label: str,
        value: str,
        type_id: int,
        *,
        sort_order: int = 0,
        is_default: bool = False,
        status: EnabledStatusEnum | str = EnabledStatusEnum.ENABLED,
        remark: Optional[str] = None,
    ) -> DictDataDetail:
        with db_session.session_scope() as db:
            return dictionary_service.create_data(
                db,
                label=label,
                value=value,
                type_id=type_id,
                sort_order=sort_order,
                is_default=is_default,
                status=status,
                remark=remark,
            )

    def update_dict_data(
        self,
        data_id: int,
        *,
        label: Optional[str] = None,
        value: Optional[str] = None,
        sort_order: Optional[int] = None,
        is_default: Optional[bool] = None,
        status: Optional[EnabledStatusEnum | str] = None,
        remark: Optional[str] = None,
    ) -> DictDataDetail:
        with db_session.session_scope() as db:
            return dictionary_service.update_data(
                db,
                data_id=data_id,
                label=label,
                value=value,
                sort_order=sort_order,
                is_default=is_default,
                status=status,
                remark=remark,
            )

    def delete_dict_data(self, data_id: int) -> None:
        with db_session.session_scope() as db:
            dictionary_service.delete_data(db, data_id=data_id)

    def delete_dict_data_batch(self, ids: Sequence[int]) -> int:
        with db_session.session_scope() as db:
            return dictionary_service.delete_data_batch(db, ids=ids)

    def get_dict_data(self, data_id: int) -> DictDataDetail:
        with db_session.session_scope() as db:
            return dictionary_service.get_data(db, data_id)

    def list_dict_data(
        self,
        type_code: str,
        status: Optional[EnabledStatusEnum | str] = None,
    ) -> List[DictDataDetail]:
        with db_session.session_scope() as db:
            return dictionary_service.list_by_type_code(db, type_code=type_code, status=status)

    def page_dict_data(
        self,
        *,
        type_id: Optional[int] = None,
        type_code: Optional[str] = None,
        keyword: Optional[str] = None,
        status: Optional[EnabledStatusEnum | str] = None,
        page: int = 1,
        size: int = 10,
    ) -> PageData[DictDataDetail]:
        with db_session.session_scope() as db:
            return dictionary_service.page_data(
                db,
                type_id=type_id,
                type_code=type_code,
                keyword=keyword,
                status=status,
                page=page,
                size=size,
            )

    def get_default_dict_data(self, type_code: str) -> Optional[DictDataDetail]:
        with db_session.session_scope() as db:
            return dictionary_service.get_default(db, type_code=type_code)

    # ------------------------------------------------------------------
    # 通知公告
    # ------------------------------------------------------------------

    def create_notice(
        self,
        title: str,
        content: str,
        *,
        notice_type: NoticeTypeEnum | str = NoticeTypeEnum.NOTICE,
        level: NoticeLevelEnum | str = NoticeLevelEnum.NORMAL,
        is_top: bool = False,
        status: Optional[NoticeStatusEnum | str] = None,
    ) -> NoticeDetail:
        with db_session.session_scope() as db:
            return notice_service.create_notice(
                db,
                title=title,
                content=content,
                notice_type=notice_type,
                level=level,
                is_top=is_top,
                status=status,
            )

    def update_notice(
        self,
        notice_id: int,
        *,
        title: Optional[str] = None,
        content: Optional[str] = None,
        notice_type: Optional[NoticeTypeEnum | str] = None,
        level: Optional[NoticeLevelEnum | str] = None,
        is_top: Optional[bool] = None,
    ) -> NoticeDetail:
        with db_session.session_scope() as db:
            return notice_service.update_notice(
                db,
                notice_id=notice_id,
                title=title,
                content=content,
                notice_type=notice_type,
                level=level,
                is_top=is_top,
            )

    def publish_notice(self, notice_id: int, publisher_id: Optional[int] = None) -> NoticeDetail:
        with db_session.session_scope() as db:
            return notice_service.publish_notice(db, notice_id=notice_id, publisher_id=publisher_id)

    def withdraw_notice(self, notice_id: int) -> NoticeDetail:
        with db_session.session_scope() as db:
            return notice_service.withdraw_notice(db, notice_id=notice_id)

    def get_notice(self, notice_id: int) -> NoticeDetail:
        with db_session.session_scope() as db:
            return notice_service.get_notice(db, notice_id)

    def list_notices(
        self,
        *,
        status: Optional[NoticeStatusEnum | str] = None,
        is_top: Optional[bool] = None,
        notice_type: Optional[NoticeTypeEnum | str] = None,
        keyword: Optional[str] = None,
    ) -> List[NoticeDetail]:
        with db_session.session_scope() as db:
            return notice_service.list_notices(
                db, status=status, is_top=is_top, notice_type=notice_type, keyword=keyword
            )

    def page_notices(
        self,
        *,
        status: Optional[NoticeStatusEnum | str] = None,
        is_top: Optional[bool] = None,
        notice_type: Optional[NoticeTypeEnum | str] = None,
        keyword: Optional[str] = None,
        page: int = 1,
        size: int = 10,
    ) -> PageData[NoticeDetail]:
        with db_session.session_scope() as db:
            return notice_service.page_notices(
                db,
                status=status,
                is_top=is_top,
                notice_type=notice_type,
                keyword=keyword,
                page=page,
                size=size,
            )

    def list_published_notices(self) -> List[NoticeDetail]:
        with db_session.session_scope() as db:
            return notice_service.list_published(db)

    def delete_notices(self, ids: Sequence[int]) -> int:
        with db_session.session_scope() as db:
            return notice_service.delete_notices(db, ids=ids)

    # ------------------------------------------------------------------
    # 系统配置
    # ------------------------------------------------------------------

    def upsert_config(
        self,
        key: str,
        value: str,
        config_type: ConfigTypeEnum | str = ConfigTypeEnum.TEXT,
        *,
        is_frontend_visible: bool = False,
        remark: Optional[str] = None,
        name: Optional[str] = None,
    ) -> ConfigDetail:
        with db_session.session_scope() as db:
            return config_service.upsert_config(
                db,
                key=key,
                value=value,
                config_type=config_type,
                is_frontend_visible=is_frontend_visible,
                remark=remark,
                name=name,
            )

    def get_config_value(self, key: str, *, include_disabled: bool = False) -> Any:
        with db_session.session_scope() as db:
            return config_service.get_config_value(db, key=key, include_disabled=include_disabled)

    def get_config(self, key: str) -> ConfigDetail:
        with db_session.session_scope() as db:
            return config_service.get_config(db, key=key)

    def list_configs(
        self,
        *,
        keyword: Optional[str] = None,
        config_type: Optional[ConfigTypeEnum | str] = None,
        is_frontend_visible: Optional[bool] = None,
        status: Optional[EnabledStatusEnum | str] = None,
        page: int = 1,
        size: int = 10,
    ) -> PageData[ConfigDetail]:
        with db_session.session_scope() as db:
            return config_service.list_configs(
                db,
                keyword=keyword,
                config_type=config_type,
                is_frontend_visible=is_frontend_visible,
                status=status,
                page=page,
                size=size,
            )

    def get_frontend_configs(self) -> Dict[str, Any]:
        with db_session.session_scope() as db:
            return config_service.get_frontend_configs(db)

    def set_config_status(self, key: str, status: EnabledStatusEnum | str) -> ConfigDetail:
        with db_session.session_scope() as db:
            return config_service.set_config_status(db, key=key, status=status)

    def delete_configs(self, ids: Sequence[int]) -> int:
        with db_session.session_scope() as db:
            return config_service.delete_configs(db, ids=ids)

    def refresh_config_cache(self) -> int:
        with db_session.session_scope() as db:
            return config_service.refresh_config_cache(db)

    # ------------------------------------------------------------------
    # 邮件发送记录
    # ------------------------------------------------------------------

    def record_email_attempt(
        self,
        to_email: str,
        subject: str,
        content: str,
        *,
        is_html: bool = False,
    ) -> EmailRecordDetail:
        with db_session.session_scope() as db:
            return email_service.record_attempt(
                db, to_email=to_email, subject=subject, content=content, is_html=is_html
            )

    def mark_email_sent(self, record_id: int, send_time: Optional[datetime] = None) -> EmailRecordDetail:
        with db_session.session_scope() as db:
            return email_service.mark_sent(db, record_id=record_id, send_time=send_time)

    def mark_email_failed(self, record_id: int, error_msg: str) -> EmailRecordDetail:
        with db_session.session_scope() as db:
            return email_service.mark_failed(db, record_id=record_id, error_msg=error_msg)

    def get_email_record(self, record_id: int) -> EmailRecordDetail:
        with db_session.session_scope() as db:
            return email_service.get_record(db, record_id)

    def list_email_records(
        self,
        *,
        to_email: Optional[str] = None,
        status: Optional[EmailStatusEnum | str] = None,
        page: int = 1,
        size: int = 10,
    ) -> PageData[EmailRecordDetail]:
        with db_session.session_scope() as db:
            return email_service.list_records(db, to_email=to_email, status=status, page=page, size=size)


__all__ = ["ReferenceDataStore"]
