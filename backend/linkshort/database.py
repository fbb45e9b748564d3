from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from .config import settings


def create_engine(url: str):
    """Create an async engine, with SQLite tuned for concurrent access"""
    is_sqlite = url.startswith("sqlite")
    connect_args = {"timeout": 30} if is_sqlite else {}

    engine = create_async_engine(url, connect_args=connect_args, pool_pre_ping=True)

    if is_sqlite:
        # Enable WAL mode and foreign keys for SQLite
        @event.listens_for(engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            if ":memory:" not in url:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return engine


def create_session_factory(bind):
    return async_sessionmaker(bind, expire_on_commit=False, autoflush=False)


engine = create_engine(settings.DATABASE_URL)

# Create session factory
SessionLocal = create_session_factory(engine)


class Base(DeclarativeBase):
    """Base class for models"""


async def create_tables(bind=None) -> None:
    from . import models  # noqa: F401  registers tables on Base.metadata

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Dependency to get database session; the factory lives on app.state
async def get_db(request: Request):
    async with request.app.state.session_factory() as db:
        yield db
