"""Database bootstrapping utilities."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from refdata.core.config import get_settings
from refdata.core.enums import (
    ConfigTypeEnum,
    EnabledStatusEnum,
    NoticeLevelEnum,
    NoticeStatusEnum,
    NoticeTypeEnum,
)
from refdata.core.timezone import now
from refdata.db import session as db_session
from refdata.models import Base, DictData, DictType, Notice, SystemConfig

logger = logging.getLogger(__name__)

# (name, code, remark, [(label, value, sort_order, is_default), ...])
DEFAULT_DICTIONARIES = [
    ("用户状态", "user_status", "用户账户状态", [("正常", "1", 1, True), ("禁用", "0", 2, False)]),
    ("角色类型", "role_type", "系统角色类型", [("管理员", "1", 1, True), ("普通用户", "2", 2, False)]),
    (
        "菜单类型",
        "menu_type",
        "系统菜单类型",
        [("目录", "C", 1, False), ("菜单", "M", 2, False), ("按钮", "F", 3, False)],
    ),
]

# (name, key, value, config_type, is_frontend_visible, remark)
DEFAULT_CONFIGS = [
    ("系统名称", "system.name", "FastAPI最佳架构", ConfigTypeEnum.TEXT, True, "系统显示名称"),
    ("系统版本", "system.version", "1.0.0", ConfigTypeEnum.TEXT, True, "系统版本号"),
    ("系统Logo", "system.logo", "/logo.png", ConfigTypeEnum.TEXT, True, "系统Logo路径"),
    ("用户注册", "user.register", "true", ConfigTypeEnum.BOOLEAN, True, "是否允许用户注册"),
    ("登录验证码", "login.captcha", "true", ConfigTypeEnum.BOOLEAN, True, "登录时是否需要验证码"),
    ("会话超时时间", "session.timeout", "3600", ConfigTypeEnum.NUMBER, False, "会话超时时间（秒）"),
    ("上传文件大小限制", "upload.max_size", "10485760", ConfigTypeEnum.NUMBER, False, "上传文件最大大小（字节）"),
    (
        "允许的文件类型",
        "upload.allowed_types",
        '["jpg","png","pdf","doc"]',
        ConfigTypeEnum.JSON,
        False,
        "允许上传的文件类型",
    ),
]

# (title, content, notice_type, level, is_top, published)
DEFAULT_NOTICES = [
    (
        "系统维护通知",
        "<p>系统将于本周六晚上22:00-24:00进行例行维护，届时系统将暂停服务，请提前做好相关安排。</p>"
        "<p>维护期间可能出现的情况：</p><ul><li>系统无法访问</li><li>数据暂时无法更新</li></ul>"
        "<p>给您带来不便，敬请谅解！</p>",
        NoticeTypeEnum.NOTICE,
        NoticeLevelEnum.IMPORTANT,
        True,
        True,
    ),
    (
        "新功能上线公告",
        "<p>我们很高兴地宣布，系统新增了以下功能：</p><ol><li>代码生成器：快速生成CRUD代码</li>"
        "<li>数据字典：统一管理系统配置</li><li>系统监控：实时查看系统运行状态</li></ol><p>欢迎大家体验使用！</p>",
        NoticeTypeEnum.ANNOUNCEMENT,
        NoticeLevelEnum.NORMAL,
        False,
        True,
    ),
    (
        "安全更新通知",
        "<p>系统已完成以下安全更新：</p><ul><li>修复XSS漏洞</li><li>更新依赖包版本</li><li>增强密码加密</li></ul>"
        "<p>建议所有用户及时更新密码！</p>",
        NoticeTypeEnum.NOTICE,
        NoticeLevelEnum.URGENT,
        False,
        True,
    ),
    (
        "数据备份提醒",
        "<p>系统将于每周日凌晨2:00自动进行数据备份，备份期间系统性能可能会有所下降。</p>",
        NoticeTypeEnum.NOTICE,
        NoticeLevelEnum.NORMAL,
        False,
        True,
    ),
    (
        "即将发布的功能预告",
        "<p>下一版本计划发布的新功能：</p><ol><li>支持多语言</li><li>移动端适配</li><li>数据导入导出</li></ol>"
        "<p>敬请期待！</p>",
        NoticeTypeEnum.ANNOUNCEMENT,
        NoticeLevelEnum.NORMAL,
        False,
        False,
    ),
]

SEED_PUBLISHER_ID = 1


def init_db(seed: Optional[bool] = None) -> None:
    """Create all database tables if they do not exist and seed baseline data.

    ``seed`` 为 ``None`` 时按 ``SEED_DEFAULT_DATA`` 配置决定；重复执行不会产生重复数据。
    """
    Base.metadata.create_all(bind=db_session.engine)

    if seed is None:
        seed = get_settings().seed_default_data
    if not seed:
        return

    session = db_session.SessionLocal()
    try:
        _seed_dictionaries(session)
        _seed_configs(session)
        _seed_notices(session)
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Failed to seed default data during database initialization")
        raise
    finally:
        session.close()


def _seed_dictionaries(db: Session) -> None:
    """确保内置字典类型及其字典项存在，已存在的记录保持不变。"""
    for name, code, remark, entries in DEFAULT_DICTIONARIES:
        dict_type = db.query(DictType).filter(DictType.code == code).first()
        if dict_type is None:
            dict_type = DictType(name=name, code=code, status=EnabledStatusEnum.ENABLED.value, remark=remark)
            db.add(dict_type)
            db.flush()
            logger.info("Seeded dict type %s", code)

        for label, value, sort_order, is_default in entries:
            exists = (
                db.query(DictData.id)
                .filter(DictData.type_id == dict_type.id, DictData.value == value)
                .first()
            )
            if exists is not None:
                continue
            db.add(
                DictData(
                    label=label,
                    value=value,
                    sort_order=sort_order,
                    type_id=dict_type.id,
                    type_code=dict_type.code,
                    is_default=is_default,
                    status=EnabledStatusEnum.ENABLED.value,
                )
            )
    db.flush()


def _seed_configs(db: Session) -> None:
    for name, key, value, config_type, visible, remark in DEFAULT_CONFIGS:
        if db.query(SystemConfig.id).filter(SystemConfig.key == key).first() is not None:
            continue
        db.add(
            SystemConfig(
                name=name,
                key=key,
                value=value,
                config_type=config_type.value,
                is_frontend_visible=visible,
                status=EnabledStatusEnum.ENABLED.value,
                remark=remark,
            )
        )
    db.flush()


def _seed_notices(db: Session) -> None:
    # 公告没有唯一键，按标题判断是否已导入
    published_at = now()
    for title, content, notice_type, level, is_top, published in DEFAULT_NOTICES:
        if db.query(Notice.id).filter(Notice.title == title).first() is not None:
            continue
        db.add(
            Notice(
                title=title,
                content=content,
                notice_type=notice_type.value,
                level=level.value,
                is_top=is_top,
                status=(NoticeStatusEnum.PUBLISHED if published else NoticeStatusEnum.DRAFT).value,
                publish_time=published_at if published else None,
                publisher_id=SEED_PUBLISHER_ID if published else None,
            )
        )
    db.flush()
