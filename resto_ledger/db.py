from __future__ import annotations
import logging
import sqlite3
from contextlib import contextmanager
from typing import Generator, Iterator
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker, declarative_base, Session

from .utils.config import DATABASE_URL

log = logging.getLogger(__name__)

def _sqlite_pragmas(dbapi_connection, _):
    cur = dbapi_connection.cursor()
    # SQLite 預設不檢查外鍵，cascade 也要靠它
    cur.execute("PRAGMA foreign_keys=ON")
    try:
        cur.execute("PRAGMA journal_mode=WAL")
        cur.execute("PRAGMA synchronous=NORMAL")
    except sqlite3.DatabaseError as e:
        # 唯讀或特殊資料庫不支援 WAL
        log.warning(f"sqlite journal pragmas skipped: {e}")
    cur.close()

def make_engine(url: str = DATABASE_URL, **kwargs) -> Engine:
    engine_kwargs = dict(pool_pre_ping=True, future=True)
    engine_kwargs.update(kwargs)
    if not url.startswith("sqlite"):
        return create_engine(url, **engine_kwargs)

    connect_args = engine_kwargs.pop("connect_args", {})
    connect_args.setdefault("check_same_thread", False)
    engine = create_engine(url, connect_args=connect_args, **engine_kwargs)
    event.listen(engine, "connect", _sqlite_pragmas)
    return engine

engine = make_engine()

Base = declarative_base()
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)

def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit what the block wrote; roll back and re-raise on any error."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise

def is_unique_violation(err: IntegrityError, *markers: str) -> bool:
    """True when ``err`` names one of ``markers`` (constraint or column list).

    PostgreSQL reports the constraint name, SQLite the constrained columns.
    """
    msg = str(err.orig)
    return any(m in msg for m in markers)

def ensure_tables(_engine: Engine = engine) -> None:
    from . import models  # noqa: F401  registers the tables on Base

    Base.metadata.create_all(bind=_engine)

__all__ = [
    "DATABASE_URL", "engine", "make_engine", "Base", "SessionLocal", "get_db",
    "transaction", "is_unique_violation", "ensure_tables",
]
