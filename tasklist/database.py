import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from tasklist import models  # noqa: F401  (registers tables on SQLModel.metadata)

logger = logging.getLogger(__name__)


class Database:
    """Owns the async engine and session factory for one application instance.

    SQLite leaves foreign keys off unless every connection asks for them, so
    the pragma is issued on connect. With ``enforce_foreign_keys=False`` the
    store accepts relationship rows that point at missing tasks.
    """

    def __init__(self, url: str, echo: bool = False, enforce_foreign_keys: bool = True):
        self.url = url
        self.enforce_foreign_keys = enforce_foreign_keys

        # Async engine
        self.engine = create_async_engine(
            url,
            echo=echo,
            future=True,
            pool_pre_ping=True,
        )

        if self.engine.dialect.name == "sqlite":
            pragma = "ON" if enforce_foreign_keys else "OFF"

            @event.listens_for(self.engine.sync_engine, "connect")
            def _set_foreign_keys(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute(f"PRAGMA foreign_keys={pragma}")
                cursor.close()

        # Session factory
        self.session_factory = sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_schema(self) -> None:
        """Create the tables if they do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info(f"Database schema ready at {self.engine.url.render_as_string(hide_password=True)}")

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def dispose(self) -> None:
        await self.engine.dispose()


# FastAPI dependency
async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
