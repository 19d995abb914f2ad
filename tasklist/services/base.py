from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

ModelType = TypeVar("ModelType")

# Range of a 64-bit INTEGER column
MIN_ID = -(2**63)
MAX_ID = 2**63 - 1


def is_storable_id(value: int) -> bool:
    """Whether an id fits the integer primary key column at all."""
    return MIN_ID <= value <= MAX_ID


class BaseCRUDService(Generic[ModelType]):
    """Base class for statement-level operations on SQLModel models.

    Write helpers only execute their statement; committing is left to the
    caller so several of them can share one transaction.
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get_all(
        self,
        session: AsyncSession,
        order_by: Optional[List[str]] = None,
    ) -> List[ModelType]:
        """Get all records, sorted by the given field names.

        Args:
            session: Database session
            order_by: Field names to sort by (prefix with - for descending)

        Returns:
            List of model instances
        """
        query = select(self.model)

        for name in order_by or []:
            desc = name.startswith("-")
            field = name.lstrip("-")
            if hasattr(self.model, field):
                order_col = getattr(self.model, field)
                query = query.order_by(order_col.desc() if desc else order_col)

        result = await session.execute(query)
        return list(result.scalars().all())

    async def update_fields(
        self,
        session: AsyncSession,
        id: int,
        **values: Any,
    ) -> bool:
        """Set columns on the record with the given ID.

        Returns:
            True if a row matched, False otherwise
        """
        if not is_storable_id(id):
            return False

        result = await session.execute(
            update(self.model).where(self.model.id == id).values(**values)
        )
        return result.rowcount > 0

    async def delete_by_id(
        self,
        session: AsyncSession,
        id: int,
    ) -> bool:
        """Delete the record with the given ID.

        Returns:
            True if a row matched, False otherwise
        """
        if not is_storable_id(id):
            return False

        result = await session.execute(
            delete(self.model).where(self.model.id == id)
        )
        return result.rowcount > 0


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit everything done in the block at once, or roll all of it back.

    Usage:
        async with atomic(session):
            await service.update_fields(session, 1, done=True)
            await service.update_fields(session, 2, done=True)
    """
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
