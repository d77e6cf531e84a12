from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from .config import DATABASE_URL, SQL_ECHO


def get_engine(database_url: str, echo: bool = False):
    return create_async_engine(database_url, echo=echo, future=True)


def get_session(engine):
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
    )


engine = get_engine(DATABASE_URL, echo=SQL_ECHO)
SessionLocal = get_session(engine)

Base = declarative_base()


async def get_db():
    async with SessionLocal() as session:
        yield session


async def create_tables(bind=None):
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def transaction(session: AsyncSession):
    """Commit on clean exit, roll back and re-raise otherwise."""
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
