"""测试夹具：为每个用例准备独立的 SQLite 数据库与内存配置缓存。"""

import os

# 必须在导入 refdata 之前设置，模块级引擎才不会指向默认的 PostgreSQL
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SEED_DEFAULT_DATA", "false")

from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from refdata.core.cache import ConfigCache, InMemoryCacheBackend, set_config_cache
from refdata.db import session as db_session
from refdata.db.init_db import init_db
from refdata.store import ReferenceDataStore


@pytest.fixture(autouse=True)
def setup_test_database(tmp_path) -> Generator[Engine, None, None]:
    """创建隔离的 SQLite 测试数据库，并替换会话工厂。"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'refdata.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    original_engine, original_factory = db_session.engine, db_session.SessionLocal
    db_session.engine = engine
    db_session.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    init_db(seed=False)
    yield engine

    engine.dispose()
    db_session.engine = original_engine
    db_session.SessionLocal = original_factory


@pytest.fixture(autouse=True)
def config_cache() -> Generator[ConfigCache, None, None]:
    cache = ConfigCache(InMemoryCacheBackend(), ttl_seconds=3600)
    set_config_cache(cache)
    yield cache
    set_config_cache(None)


@pytest.fixture()
def db_session_fixture() -> Generator[Session, None, None]:
    """提供给测试用例使用的数据库会话。"""
    session = db_session.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def store() -> ReferenceDataStore:
    return ReferenceDataStore()
