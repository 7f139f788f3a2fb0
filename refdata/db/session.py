"""Database engine, session factory and transaction helpers."""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from refdata.core.config import get_settings
from refdata.core.exceptions import AppException, ConflictError, StoreError
from refdata.core.logger import logger

settings = get_settings()

# ``pool_pre_ping`` keeps the connection pool healthy; ``echo`` mirrors SQL logs
# when enabled in settings for easier debugging.
engine = create_engine(settings.sql_database_url, pool_pre_ping=True, echo=settings.database_echo)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite 默认不校验外键，级联删除依赖此开关
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """在一个事务内执行代码块：成功提交，任何异常回滚。

    - 唯一约束冲突（并发插入）转换为 ``ConflictError``；
    - 其余数据库异常转换为 ``StoreError``；
    - 业务异常原样上抛。
    """
    try:
        yield db
        db.commit()
    except AppException:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Integrity violation, transaction rolled back: %s", exc.orig)
        raise ConflictError("记录违反唯一性约束") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Store failure, transaction rolled back", exc_info=True)
        raise StoreError("数据存储不可用") from exc
    except Exception:
        db.rollback()
        raise


@contextmanager
def session_scope() -> Iterator[Session]:
    """打开一个独立会话，使用完毕后关闭。"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
