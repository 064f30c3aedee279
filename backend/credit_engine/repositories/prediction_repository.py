"""Repository for prediction audit records."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from credit_engine.models.domain.prediction import Prediction
from credit_engine.models.domain.rule import RuleExecution
from credit_engine.repositories.base import BaseRepository


class PredictionRepository(BaseRepository[Prediction]):
    """Repository for Prediction with rule execution loading."""

    def __init__(self, db: AsyncSession):
        """
        Initialize the prediction repository.

        Args:
            db: Async database session
        """
        super().__init__(Prediction, db)

    async def create_with_executions(
        self, prediction: Prediction, executions: List[RuleExecution]
    ) -> Prediction:
        """
        Persist a prediction together with its rule executions.

        Args:
            prediction: New prediction
            executions: New executions, attached to the prediction

        Returns:
            The persisted prediction
        """
        prediction.rule_executions = executions
        self.db.add(prediction)
        await self.db.flush()
        return prediction

    async def get_recent(self, skip: int = 0, limit: int = 20) -> List[Prediction]:
        """
        Retrieve predictions, newest first.

        Args:
            skip: Number of records to skip (offset)
            limit: Maximum number of records to return

        Returns:
            List of predictions
        """
        stmt = (
            select(Prediction)
            .order_by(Prediction.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id_with_executions(self, id: UUID) -> Optional[Prediction]:
        """
        Retrieve a prediction with its rule executions eagerly loaded.

        Args:
            id: The UUID of the prediction

        Returns:
            The prediction if found, None otherwise
        """
        stmt = (
            select(Prediction)
            .where(Prediction.id == id)
            .options(selectinload(Prediction.rule_executions))
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
