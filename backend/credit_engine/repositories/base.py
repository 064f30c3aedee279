from typing import Any, Generic, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from credit_engine.db.base import BaseModel

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Async persistence for one configuration or audit table.

    Subclasses add the queries their aggregate needs (evaluation order,
    upsert keys, audit lookups). Nothing here commits: the owning service
    decides the transaction boundary.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    async def create(self, **kwargs: Any) -> ModelType:
        """Insert a row and return it with its generated id and timestamps."""
        instance = self.model(**kwargs)
        self.db.add(instance)
        await self.db.flush()
        await self.db.refresh(instance)
        return instance

    async def get_by_id(self, id: UUID) -> Optional[ModelType]:
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def update(self, instance: ModelType, **kwargs: Any) -> ModelType:
        """
        Apply field changes to a loaded row.

        Args:
            instance: Row previously loaded through this session
            **kwargs: Column values to set

        Returns:
            The row refreshed from the database
        """
        for column, value in kwargs.items():
            setattr(instance, column, value)
        await self.db.flush()
        await self.db.refresh(instance)
        return instance

    async def delete(self, id: UUID) -> bool:
        """Delete by id. Returns False when no row matched."""
        result = await self.db.execute(delete(self.model).where(self.model.id == id))
        await self.db.flush()
        return result.rowcount > 0

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()
