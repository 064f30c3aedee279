"""Repositories for scoring factor and score range configuration."""

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from credit_engine.models.domain.scoring import ScoreRange, ScoringConfig
from credit_engine.repositories.base import BaseRepository


class ScoringConfigRepository(BaseRepository[ScoringConfig]):
    """Repository for ScoringConfig."""

    def __init__(self, db: AsyncSession):
        """
        Initialize the scoring config repository.

        Args:
            db: Async database session
        """
        super().__init__(ScoringConfig, db)

    async def get_configs(self, active_only: bool = False) -> List[ScoringConfig]:
        """
        Retrieve factors grouped by category, then by name.

        Args:
            active_only: If True, return only active factors

        Returns:
            List of scoring configs
        """
        stmt = select(ScoringConfig)
        if active_only:
            stmt = stmt.where(ScoringConfig.is_active == True)
        stmt = stmt.order_by(ScoringConfig.category, ScoringConfig.name)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_active_for_scoring(self) -> List[ScoringConfig]:
        """
        Retrieve active factors in a stable evaluation order.

        Returns:
            Active scoring configs ordered by creation time
        """
        stmt = (
            select(ScoringConfig)
            .where(ScoringConfig.is_active == True)
            .order_by(ScoringConfig.created_at, ScoringConfig.id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_factor(self, factor: str) -> Optional[ScoringConfig]:
        """
        Retrieve a factor by its record field key.

        Args:
            factor: Factor key (case-sensitive)

        Returns:
            The scoring config if found, None otherwise
        """
        stmt = select(ScoringConfig).where(ScoringConfig.factor == factor)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_all(self) -> int:
        """
        Delete every scoring config.

        Returns:
            Number of deleted rows
        """
        result = await self.db.execute(delete(ScoringConfig))
        await self.db.flush()
        return result.rowcount


class ScoreRangeRepository(BaseRepository[ScoreRange]):
    """Repository for ScoreRange."""

    def __init__(self, db: AsyncSession):
        """
        Initialize the score range repository.

        Args:
            db: Async database session
        """
        super().__init__(ScoreRange, db)

    async def get_ranges(self, active_only: bool = False) -> List[ScoreRange]:
        """
        Retrieve ranges ordered by min_score descending, then priority.

        Args:
            active_only: If True, return only active ranges

        Returns:
            List of score ranges
        """
        stmt = select(ScoreRange)
        if active_only:
            stmt = stmt.where(ScoreRange.is_active == True)
        stmt = stmt.order_by(ScoreRange.min_score.desc(), ScoreRange.priority)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_active_for_interpretation(self) -> List[ScoreRange]:
        """
        Retrieve active ranges in configuration order.

        Returns:
            Active score ranges ordered by creation time
        """
        stmt = (
            select(ScoreRange)
            .where(ScoreRange.is_active == True)
            .order_by(ScoreRange.created_at, ScoreRange.id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_name(self, name: str) -> Optional[ScoreRange]:
        """
        Retrieve a range by name.

        Args:
            name: Range name (case-sensitive)

        Returns:
            The score range if found, None otherwise
        """
        stmt = select(ScoreRange).where(ScoreRange.name == name)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
