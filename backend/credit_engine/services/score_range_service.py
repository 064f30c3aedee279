"""Score range configuration service."""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Union
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from credit_engine.core.exceptions import NotFoundError
from credit_engine.models.domain.scoring import ScoreRange
from credit_engine.repositories.scoring_repository import ScoreRangeRepository
from credit_engine.services.defaults import DEFAULT_SCORE_RANGES
from credit_engine.services.engine import (
    RangeDefinition,
    RangeValidation,
    ScoreInterpretation,
    ScoreRangeInterpreter,
    business_impact,
    validate_ranges,
)

logger = logging.getLogger(__name__)


class ScoreRangeService:
    """
    Score range service for managing score tiers.

    Gaps and overlaps are allowed to be stored; they are reported by
    ``validate_ranges`` rather than rejected, and scores that fall through
    resolve to the Unknown / Manual Review fallback.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the score range service.

        Args:
            db: Async database session
        """
        self.db = db
        self.repo = ScoreRangeRepository(db)

    # ===== Queries =====

    async def list_ranges(self, active_only: bool = False) -> List[ScoreRange]:
        """
        Retrieve score ranges, highest scores first.

        Args:
            active_only: If True, return only active ranges
        """
        return await self.repo.get_ranges(active_only=active_only)

    async def get_range(self, range_id: UUID) -> ScoreRange:
        """
        Retrieve a score range by ID.

        Raises:
            NotFoundError: If the range does not exist
        """
        score_range = await self.repo.get_by_id(range_id)
        if not score_range:
            raise NotFoundError(f"Score range with ID {range_id} not found")
        return score_range

    async def get_active_definitions(self) -> List[RangeDefinition]:
        """Active ranges parsed for the interpreter."""
        ranges = await self.repo.get_active_for_interpretation()
        return [RangeDefinition.from_model(score_range) for score_range in ranges]

    async def validate_ranges(self) -> RangeValidation:
        """
        Report overlaps and gaps in the active ranges.

        Returns:
            RangeValidation with overlapping pairs and uncovered intervals
        """
        validation = validate_ranges(await self.get_active_definitions())
        if not validation.is_valid:
            logger.warning(
                f"Score ranges invalid: {len(validation.overlaps)} overlaps, "
                f"{len(validation.gaps)} gaps"
            )
        return validation

    async def interpret(self, score: Union[int, Decimal]) -> ScoreInterpretation:
        """Interpret a score against the active ranges."""
        interpreter = ScoreRangeInterpreter(await self.get_active_definitions())
        return interpreter.interpret(score)

    async def impact(self) -> Dict[str, Any]:
        """
        Coverage and outcome distributions of the active ranges.

        Returns:
            Dict with total/active counts, coverage and distributions
        """
        impact = business_impact(await self.get_active_definitions())
        impact["total_ranges"] = await self.repo.count()
        return impact

    # ===== CRUD Operations =====

    async def create_range(self, **fields: Any) -> ScoreRange:
        """
        Create a score range.

        Raises:
            ValueError: If the name exists or the bounds are inverted
        """
        existing = await self.repo.get_by_name(fields["name"])
        if existing:
            raise ValueError(f"Score range with name '{fields['name']}' already exists")

        self._check_bounds(fields.get("min_score"), fields.get("max_score"))

        score_range = await self.repo.create(**fields)
        await self.db.commit()
        await self.db.refresh(score_range)

        logger.info(
            f"Created score range '{score_range.name}' "
            f"[{score_range.min_score}, {score_range.max_score}]"
        )
        return score_range

    async def update_range(self, range_id: UUID, **fields: Any) -> ScoreRange:
        """
        Update a score range.

        Raises:
            NotFoundError: If the range does not exist
            ValueError: If the new name exists or the merged bounds are inverted
        """
        score_range = await self.get_range(range_id)

        new_name = fields.get("name")
        if new_name and new_name != score_range.name:
            existing = await self.repo.get_by_name(new_name)
            if existing:
                raise ValueError(f"Score range with name '{new_name}' already exists")

        self._check_bounds(
            fields.get("min_score", score_range.min_score),
            fields.get("max_score", score_range.max_score),
        )

        score_range = await self.repo.update(score_range, **fields)
        await self.db.commit()
        await self.db.refresh(score_range)
        return score_range

    async def toggle_range(
        self, range_id: UUID, is_active: Optional[bool] = None
    ) -> ScoreRange:
        """
        Set or flip the active flag of a score range.

        Raises:
            NotFoundError: If the range does not exist
        """
        score_range = await self.get_range(range_id)
        score_range.is_active = (not score_range.is_active) if is_active is None else is_active
        await self.db.commit()
        await self.db.refresh(score_range)
        return score_range

    async def delete_range(self, range_id: UUID) -> None:
        """
        Delete a score range.

        Raises:
            NotFoundError: If the range does not exist
        """
        deleted = await self.repo.delete(range_id)
        if not deleted:
            raise NotFoundError(f"Score range with ID {range_id} not found")
        await self.db.commit()

    async def seed_defaults(self) -> Tuple[int, int, List[ScoreRange]]:
        """
        Create or update the five default ranges, matched by name.

        Ranges with other names are left untouched.

        Returns:
            (created count, updated count, seeded ranges)
        """
        created = 0
        updated = 0
        ranges = []

        for defaults in DEFAULT_SCORE_RANGES:
            existing = await self.repo.get_by_name(defaults["name"])
            if existing:
                ranges.append(await self.repo.update(existing, is_active=True, **defaults))
                updated += 1
            else:
                ranges.append(await self.repo.create(**defaults))
                created += 1

        await self.db.commit()
        for score_range in ranges:
            await self.db.refresh(score_range)

        logger.info(f"Seeded default score ranges: {created} created, {updated} updated")
        return created, updated, ranges

    @staticmethod
    def _check_bounds(min_score: Optional[int], max_score: Optional[int]) -> None:
        if min_score is not None and max_score is not None and max_score < min_score:
            raise ValueError("max_score cannot be lower than min_score")
