from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from streamhub.config import DATABASE_URL, DB_ECHO


def async_database_url(url: str) -> str:
    """Points plain Postgres URLs (including the legacy ``postgres://`` form) at asyncpg."""
    for scheme in ("postgres://", "postgresql://"):
        if url.startswith(scheme):
            return "postgresql+asyncpg://" + url[len(scheme):]
    return url


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {}
    # hosted Postgres drops idle connections
    return {"pool_pre_ping": True, "pool_recycle": 1800}


_url = async_database_url(DATABASE_URL)
engine = create_async_engine(_url, echo=DB_ECHO, **_engine_options(_url))

AsyncSessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
Base = declarative_base()


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; routes commit explicitly."""
    async with AsyncSessionLocal() as session:
        yield session
