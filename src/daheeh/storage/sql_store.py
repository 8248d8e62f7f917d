"""SQL-backed key-value store (SQLite on device by default)."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from sqlalchemy import DateTime, String, Text, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from daheeh.errors import StorageError

logger = structlog.get_logger()


class Base(DeclarativeBase):
    pass


class KVEntry(Base):
    """One persisted key."""

    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String(320), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class SqlStore:
    """KeyValueStore over an async SQLAlchemy engine.

    Call :meth:`init` once before use; it creates the table if needed.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_url(cls, url: str) -> SqlStore:
        return cls(create_async_engine(url, echo=False))

    async def init(self) -> None:
        """Create the backing table if it does not exist."""
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise StorageError("init", KVEntry.__tablename__, e) from e

    async def get(self, key: str) -> str | None:
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(KVEntry.value).where(KVEntry.key == key))
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError("get", key, e) from e

    async def set(self, key: str, value: str) -> None:
        try:
            async with self._session_factory() as session:
                await session.merge(KVEntry(key=key, value=value, updated_at=datetime.now(timezone.utc)))
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError("set", key, e) from e

    async def remove(self, key: str) -> None:
        try:
            async with self._session_factory() as session:
                await session.execute(delete(KVEntry).where(KVEntry.key == key))
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError("remove", key, e) from e

    async def close(self) -> None:
        """Dispose of the engine."""
        await self._engine.dispose()
