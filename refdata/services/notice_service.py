"""通知公告服务：维护公告内容与 草稿 -> 发布 -> 撤回 生命周期。"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from refdata.core.enums import NoticeLevelEnum, NoticeStatusEnum, NoticeTypeEnum
from refdata.core.exceptions import InvalidStateError, NotFoundError
from refdata.core.timezone import now
from refdata.crud.notice import notice_crud
from refdata.db.session import atomic
from refdata.models.notice import Notice
from refdata.schemas.common import PageData, enum_value, normalize_page, validate_payload
from refdata.schemas.notice import NoticeCreate, NoticeDetail, NoticeUpdate

logger = logging.getLogger(__name__)

_STATUS_LABELS = {
    NoticeStatusEnum.DRAFT.value: "草稿",
    NoticeStatusEnum.PUBLISHED.value: "已发布",
    NoticeStatusEnum.WITHDRAWN.value: "已撤回",
}


class NoticeService:
    def create_notice(
        self,
        db: Session,
        *,
        title: str,
        content: str,
        notice_type: NoticeTypeEnum | str = NoticeTypeEnum.NOTICE,
        level: NoticeLevelEnum | str = NoticeLevelEnum.NORMAL,
        is_top: bool = False,
        status: Optional[NoticeStatusEnum | str] = None,
    ) -> NoticeDetail:
        """新建公告，无论调用方传入何种 ``status`` 均以草稿保存。"""
        payload = validate_payload(
            NoticeCreate,
            title=title,
            content=content,
            notice_type=notice_type,
            level=level,
            is_top=is_top,
        )
        if status is not None and status != NoticeStatusEnum.DRAFT:
            logger.debug("Ignoring caller supplied notice status %s on create", status)

        with atomic(db):
            created = notice_crud.create(
                db,
                {
                    "title": payload.title,
                    "content": payload.content,
                    "notice_type": payload.notice_type.value,
                    "level": payload.level.value,
                    "is_top": payload.is_top,
                    "status": NoticeStatusEnum.DRAFT.value,
                    "publish_time": None,
                    "publisher_id": None,
                },
                auto_commit=False,
            )
        logger.info("Created notice id=%s as draft", created.id)
        return NoticeDetail.model_validate(created)

    def update_notice(
        self,
        db: Session,
        *,
        notice_id: int,
        title: Optional[str] = None,
        content: Optional[str] = None,
        notice_type: Optional[NoticeTypeEnum | str] = None,
        level: Optional[NoticeLevelEnum | str] = None,
        is_top: Optional[bool] = None,
    ) -> NoticeDetail:
        """修改公告内容；已撤回的公告不可再编辑。"""
        payload = validate_payload(
            NoticeUpdate,
            title=title,
            content=content,
            notice_type=notice_type,
            level=level,
            is_top=is_top,
        )

        with atomic(db):
            notice = notice_crud.get_for_update(db, notice_id)
            if notice is None:
                raise NotFoundError("通知公告不存在")
            if notice.status == NoticeStatusEnum.WITHDRAWN.value:
                raise InvalidStateError("已撤回的公告不可编辑")
            changes = payload.model_dump(exclude_none=True)
            for field, value in changes.items():
                setattr(notice, field, getattr(value, "value", value))
            notice_crud.save(db, notice, auto_commit=False)
        db.refresh(notice)
        return NoticeDetail.model_validate(notice)

    def publish_notice(self, db: Session, *, notice_id: int, publisher_id: Optional[int]) -> NoticeDetail:
        """发布草稿：写入发布时间与发布人。

        已撤回（以及已发布）的公告发布失败，并发发布时只有一个调用方成功。
        """
        with atomic(db):
            hit = notice_crud.transition(
                db,
                id=notice_id,
                from_statuses=[NoticeStatusEnum.DRAFT.value],
                values={
                    "status": NoticeStatusEnum.PUBLISHED.value,
                    "publish_time": now(),
                    "publisher_id": publisher_id,
                },
            )
            if not hit:
                self._raise_transition_error(db, notice_id, "发布")
        logger.info("Published notice id=%s by publisher %s", notice_id, publisher_id)
        return self.get_notice(db, notice_id)

    def withdraw_notice(self, db: Session, *, notice_id: int) -> NoticeDetail:
        """撤回已发布的公告，其它状态下撤回失败。"""
        with atomic(db):
            hit = notice_crud.transition(
                db,
                id=notice_id,
                from_statuses=[NoticeStatusEnum.PUBLISHED.value],
                values={"status": NoticeStatusEnum.WITHDRAWN.value},
            )
            if not hit:
                self._raise_transition_error(db, notice_id, "撤回")
        logger.info("Withdrew notice id=%s", notice_id)
        return self.get_notice(db, notice_id)

    def get_notice(self, db: Session, notice_id: int) -> NoticeDetail:
        notice = notice_crud.get(db, notice_id)
        if notice is None:
            raise NotFoundError("通知公告不存在")
        return NoticeDetail.model_validate(notice)

    def list_notices(
        self,
        db: Session,
        *,
        status: Optional[NoticeStatusEnum | str] = None,
        is_top: Optional[bool] = None,
        notice_type: Optional[NoticeTypeEnum | str] = None,
        keyword: Optional[str] = None,
    ) -> List[NoticeDetail]:
        """按过滤条件返回公告：置顶优先，其次发布时间倒序，最后 ID 倒序。"""
        items = notice_crud.list_with_filters(
            db,
            status=enum_value(NoticeStatusEnum, status),
            is_top=is_top,
            notice_type=enum_value(NoticeTypeEnum, notice_type),
            keyword=keyword,
        )
        return [NoticeDetail.model_validate(item) for item in items]

    def page_notices(
        self,
        db: Session,
        *,
        status: Optional[NoticeStatusEnum | str] = None,
        is_top: Optional[bool] = None,
        notice_type: Optional[NoticeTypeEnum | str] = None,
        keyword: Optional[str] = None,
        page: int = 1,
        size: int = 10,
    ) -> PageData[NoticeDetail]:
        page, size, skip = normalize_page(page, size)
        items, total = notice_crud.page_with_filters(
            db,
            skip=skip,
            limit=size,
            status=enum_value(NoticeStatusEnum, status),
            is_top=is_top,
            notice_type=enum_value(NoticeTypeEnum, notice_type),
            keyword=keyword,
        )
        return PageData[NoticeDetail](
            total=total,
            page=page,
            size=size,
            list=[NoticeDetail.model_validate(item) for item in items],
        )

    def list_published(self, db: Session) -> List[NoticeDetail]:
        """公开展示用：仅返回已发布的公告。"""
        return self.list_notices(db, status=NoticeStatusEnum.PUBLISHED)

    def delete_notices(self, db: Session, *, ids: Sequence[int]) -> int:
        with atomic(db):
            deleted = notice_crud.delete_by_ids(db, list(ids))
        logger.info("Deleted %s notices", deleted)
        return deleted

    @staticmethod
    def _raise_transition_error(db: Session, notice_id: int, action: str) -> None:
        current: Optional[Notice] = notice_crud.get(db, notice_id)
        if current is None:
            raise NotFoundError("通知公告不存在")
        label = _STATUS_LABELS.get(current.status, current.status)
        raise InvalidStateError(f"公告当前状态为{label}，无法{action}", data={"status": current.status})


notice_service = NoticeService()
