"""数据库初始化与内置数据导入。"""

from __future__ import annotations

from refdata.core.enums import NoticeStatusEnum
from refdata.db.init_db import DEFAULT_CONFIGS, DEFAULT_NOTICES, init_db
from refdata.models import DictData, DictType, Notice, SystemConfig
from refdata.store import ReferenceDataStore


def test_seeding_is_idempotent(db_session_fixture):
    init_db(seed=True)
    init_db(seed=True)

    assert db_session_fixture.query(DictType).count() == 3
    assert db_session_fixture.query(DictData).count() == 7
    assert db_session_fixture.query(SystemConfig).count() == len(DEFAULT_CONFIGS)
    assert db_session_fixture.query(Notice).count() == len(DEFAULT_NOTICES)


def test_seeded_data_is_usable_through_the_store(store: ReferenceDataStore):
    init_db(seed=True)

    assert [entry.label for entry in store.list_dict_data("menu_type")] == ["目录", "菜单", "按钮"]
    assert store.get_default_dict_data("user_status").value == "1"
    assert store.get_default_dict_data("menu_type") is None

    assert store.get_config_value("session.timeout") == 3600
    assert store.get_config_value("upload.allowed_types") == ["jpg", "png", "pdf", "doc"]
    assert store.get_frontend_configs() == {
        "system.name": "FastAPI最佳架构",
        "system.version": "1.0.0",
        "system.logo": "/logo.png",
        "user.register": True,
        "login.captcha": True,
    }

    notices = store.list_notices()
    assert notices[0].title == "系统维护通知"
    assert notices[0].is_top is True
    assert notices[-1].status == NoticeStatusEnum.DRAFT
    assert len(store.list_published_notices()) == 4


def test_init_without_seed_leaves_tables_empty(db_session_fixture):
    init_db(seed=False)

    assert db_session_fixture.query(DictType).count() == 0
    assert db_session_fixture.query(Notice).count() == 0
