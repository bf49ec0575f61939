"""
Database engine and sessions for Word Scramble Bot.
"""
import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config import SETTINGS, LOGGER_NAME_DB
from models.db_models import Base

logger = logging.getLogger(LOGGER_NAME_DB)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessions keep loaded objects usable after commit."""
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False, autoflush=False)


# SQL is echoed in dev mode
engine = create_async_engine(SETTINGS.database_url, echo=SETTINGS.dev_mode, pool_pre_ping=True)
async_session_factory = create_session_factory(engine)


async def init_database(bind: AsyncEngine = engine) -> None:
    """Create any missing tables."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"Database ready ({bind.url.render_as_string(hide_password=True)})")


async def close_database() -> None:
    await engine.dispose()
    logger.info("Database connections closed.")
