"""Database configuration and session management"""

from sqlalchemy import create_engine, event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

from .config import settings

database_url = settings.DATABASE_URL
if database_url.startswith("sqlite:///"):
    database_url = database_url.replace("sqlite:///", "sqlite+aiosqlite:///")

engine = create_async_engine(
    database_url,
    echo=False,
    future=True,
    # aiosqlite connections are bound to the loop that opened them
    poolclass=NullPool if "sqlite" in database_url else None,
    connect_args={"check_same_thread": False} if "sqlite" in database_url else {},
)

sync_database_url = database_url.replace("+aiosqlite", "")
sync_engine = create_engine(
    sync_database_url,
    echo=False,
    connect_args={"check_same_thread": False} if "sqlite" in sync_database_url else {},
)

if "sqlite" in database_url:
    # pysqlite's implicit BEGIN breaks SAVEPOINT handling; emit it ourselves
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


AsyncSessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

SessionLocal = sessionmaker(sync_engine, class_=Session, expire_on_commit=False)
Base = declarative_base()


async def get_db():
    """Dependency to get async database session"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db():
    """
    Initialize database (create tables)
    Safe to call multiple times - only creates tables that don't exist
    """
    # Import all models to ensure they're registered with Base.metadata
    from .models import Entry, User  # noqa: F401

    async with engine.begin() as conn:

        def create_tables(connection):
            Base.metadata.create_all(connection, checkfirst=True)

        await conn.run_sync(create_tables)
