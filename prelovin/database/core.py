from contextlib import contextmanager
from typing import Annotated
from fastapi import Depends
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from ..core.config import settings
from ..logging import logger

DATABASE_URL = settings.DATABASE_URL

logger.info("Using database: Postgresql" if DATABASE_URL.startswith("postgresql") else "Using database: SQLite")


def build_engine(url: str, **kwargs):
    """Create an engine with the settings appropriate for PostgreSQL vs SQLite."""
    if url.startswith("postgresql"):
        return create_engine(
            url,
            pool_pre_ping=True,
            pool_recycle=300,
            echo=settings.SQL_ECHO,
            **kwargs
        )

    connect_args = {"check_same_thread": False, **kwargs.pop("connect_args", {})}
    sqlite_engine = create_engine(
        url,
        connect_args=connect_args,
        echo=settings.SQL_ECHO,
        **kwargs
    )

    @event.listens_for(sqlite_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope(session_factory=None):
    """Session for scripts and background jobs: commit on success, roll back on error."""
    db = (session_factory or SessionLocal)()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


DbSession = Annotated[Session, Depends(get_db)]
