"""系统配置：写入、类型化读取、启停与带版本的缓存维护。"""

from __future__ import annotations

import pytest

from refdata.core.cache import ConfigCache, InMemoryCacheBackend
from refdata.core.exceptions import DisabledError, NotFoundError, ValidationError
from refdata.crud.system_config import system_config_crud
from refdata.models.system_config import SystemConfig
from refdata.store import ReferenceDataStore


def test_upsert_creates_then_overwrites_in_place(store: ReferenceDataStore, db_session_fixture):
    created = store.upsert_config("session.timeout", "3600", "number", remark="会话超时时间（秒）")
    assert created.name == "session.timeout"
    assert created.status.value == "enabled"

    updated = store.upsert_config("session.timeout", "7200", "number", name="会话超时时间")

    assert updated.id == created.id
    assert updated.value == "7200"
    assert updated.name == "会话超时时间"
    assert updated.remark == "会话超时时间（秒）"
    assert db_session_fixture.query(SystemConfig).filter(SystemConfig.key == "session.timeout").count() == 1
    assert store.get_config_value("session.timeout") == 7200


@pytest.mark.parametrize(
    ("value", "config_type", "expected"),
    [
        ("FastAPI最佳架构", "text", "FastAPI最佳架构"),
        ("10485760", "number", 10485760),
        ("0.75", "number", 0.75),
        ("TRUE", "boolean", True),
        ("0", "boolean", False),
        ('{"theme": "dark"}', "json", {"theme": "dark"}),
        ('["jpg","png","pdf","doc"]', "array", ["jpg", "png", "pdf", "doc"]),
    ],
)
def test_get_config_value_decodes_by_type(store: ReferenceDataStore, value, config_type, expected):
    store.upsert_config("demo.value", value, config_type)

    assert store.get_config_value("demo.value") == expected


@pytest.mark.parametrize(
    ("value", "config_type"),
    [("abc", "number"), ("yes", "boolean"), ("{broken", "json"), ('{"a": 1}', "array")],
)
def test_upsert_rejects_values_that_do_not_decode(store: ReferenceDataStore, value, config_type):
    with pytest.raises(ValidationError):
        store.upsert_config("demo.value", value, config_type)

    with pytest.raises(NotFoundError):
        store.get_config("demo.value")


def test_upsert_rejects_invalid_keys(store: ReferenceDataStore):
    with pytest.raises(ValidationError):
        store.upsert_config("bad key!", "1", "number")
    with pytest.raises(ValidationError):
        store.upsert_config("demo.value", "1", "yaml")


def test_missing_config_is_not_found(store: ReferenceDataStore):
    with pytest.raises(NotFoundError):
        store.get_config_value("does.not.exist")


def test_disabled_config_requires_opt_in(store: ReferenceDataStore):
    store.upsert_config("login.captcha", "true", "boolean", is_frontend_visible=True)
    assert store.get_config_value("login.captcha") is True

    store.set_config_status("login.captcha", "disabled")

    with pytest.raises(DisabledError):
        store.get_config_value("login.captcha")
    assert store.get_config_value("login.captcha", include_disabled=True) is True

    store.set_config_status("login.captcha", "enabled")
    assert store.get_config_value("login.captcha") is True


def test_frontend_configs_only_include_enabled_visible_entries(store: ReferenceDataStore):
    store.upsert_config("system.name", "FastAPI最佳架构", "text", is_frontend_visible=True)
    store.upsert_config("user.register", "true", "boolean", is_frontend_visible=True)
    store.upsert_config("login.captcha", "false", "boolean", is_frontend_visible=True)
    store.upsert_config("session.timeout", "3600", "number")
    store.set_config_status("login.captcha", "disabled")

    assert store.get_frontend_configs() == {"system.name": "FastAPI最佳架构", "user.register": True}


def test_upsert_writes_new_value_through_to_cache(store: ReferenceDataStore, config_cache: ConfigCache):
    store.upsert_config("system.version", "1.0.0", "text")
    assert store.get_config_value("system.version") == "1.0.0"
    assert config_cache.current_version("system.version") == 1

    store.upsert_config("system.version", "1.1.0", "text")

    assert '"1.1.0"' in config_cache.get("system.version")
    assert config_cache.current_version("system.version") == 2
    assert store.get_config_value("system.version") == "1.1.0"


def test_read_fill_does_not_overwrite_newer_write(
    store: ReferenceDataStore, config_cache: ConfigCache, monkeypatch
):
    store.upsert_config("system.version", "1.0.0", "text")
    config_cache.backend = InMemoryCacheBackend()
    original_store = config_cache.store
    calls = {"count": 0}

    def write_lands_before_fill(key, payload, version):
        # 读取方已读到旧行、尚未回填时，另一调用方提交了新值
        calls["count"] += 1
        if calls["count"] == 1:
            store.upsert_config("system.version", "2.0.0", "text")
        return original_store(key, payload, version)

    monkeypatch.setattr(config_cache, "store", write_lands_before_fill)

    assert store.get_config_value("system.version") == "1.0.0"
    assert store.get_config_value("system.version") == "2.0.0"
    assert config_cache.current_version("system.version") == 2


def test_status_change_is_visible_through_cache(store: ReferenceDataStore, config_cache: ConfigCache):
    store.upsert_config("login.captcha", "true", "boolean")
    store.get_config_value("login.captcha")

    store.set_config_status("login.captcha", "disabled")

    assert config_cache.current_version("login.captcha") == 2
    with pytest.raises(DisabledError):
        store.get_config_value("login.captcha")


def test_delete_configs_removes_rows_and_cache(store: ReferenceDataStore, config_cache: ConfigCache):
    first = store.upsert_config("upload.max_size", "10485760", "number")
    second = store.upsert_config("system.logo", "/logo.png", "text")
    store.get_config_value("upload.max_size")

    assert store.delete_configs([first.id, second.id, 9999]) == 2

    assert config_cache.get("upload.max_size") is None
    with pytest.raises(NotFoundError):
        store.get_config_value("upload.max_size")


def test_stale_fill_after_delete_is_rejected(store: ReferenceDataStore, config_cache: ConfigCache):
    created = store.upsert_config("upload.max_size", "10485760", "number")
    stale_payload = config_cache.get("upload.max_size")

    store.delete_configs([created.id])

    assert config_cache.store("upload.max_size", stale_payload, 1) is False
    with pytest.raises(NotFoundError):
        store.get_config_value("upload.max_size")


def test_recreated_config_outranks_deleted_marker(
    store: ReferenceDataStore, config_cache: ConfigCache, db_session_fixture
):
    created = store.upsert_config("upload.max_size", "10485760", "number")
    store.delete_configs([created.id])

    store.upsert_config("upload.max_size", "2048", "number")

    row = db_session_fixture.query(SystemConfig).filter(SystemConfig.key == "upload.max_size").one()
    assert row.version == 3
    assert store.get_config_value("upload.max_size") == 2048


def test_refresh_config_cache_rebuilds_entries(store: ReferenceDataStore, config_cache: ConfigCache):
    store.upsert_config("system.name", "参考数据", "text")
    store.upsert_config("system.version", "1.0.0", "text")
    config_cache.backend = InMemoryCacheBackend()

    assert store.refresh_config_cache() == 2
    assert config_cache.get("system.name") is not None
    assert config_cache.current_version("system.version") == 1


def test_list_configs_filters_and_pages(store: ReferenceDataStore):
    store.upsert_config("system.name", "参考数据", "text", is_frontend_visible=True)
    store.upsert_config("system.version", "1.0.0", "text", is_frontend_visible=True)
    store.upsert_config("session.timeout", "3600", "number")

    page = store.list_configs(keyword="system", page=1, size=1)
    assert page.total == 2
    assert [item.key for item in page.list] == ["system.name"]

    numbers = store.list_configs(config_type="number")
    assert [item.key for item in numbers.list] == ["session.timeout"]
    assert store.list_configs(is_frontend_visible=False).total == 1


def test_upsert_retries_as_update_after_concurrent_insert(store: ReferenceDataStore, monkeypatch):
    existing = store.upsert_config("system.version", "1.0.0", "text")
    original_get_by_key = system_config_crud.get_by_key
    calls = {"count": 0}

    def lose_the_race(db, key, *, for_update=False):
        # 第一次查询模拟另一事务尚未提交时的读取结果
        calls["count"] += 1
        if calls["count"] == 1:
            return None
        return original_get_by_key(db, key, for_update=for_update)

    monkeypatch.setattr(system_config_crud, "get_by_key", lose_the_race)

    updated = store.upsert_config("system.version", "2.0.0", "text")

    assert calls["count"] == 2
    assert updated.id == existing.id
    assert updated.value == "2.0.0"
