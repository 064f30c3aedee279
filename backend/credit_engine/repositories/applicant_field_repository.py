"""Repository for configurable applicant fields."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from credit_engine.models.domain.applicant_field import ApplicantField
from credit_engine.repositories.base import BaseRepository


class ApplicantFieldRepository(BaseRepository[ApplicantField]):
    """Repository for ApplicantField."""

    def __init__(self, db: AsyncSession):
        super().__init__(ApplicantField, db)

    async def get_fields(
        self, category: Optional[str] = None, active_only: bool = False
    ) -> List[ApplicantField]:
        """
        Retrieve fields grouped by category, then in display order.

        Args:
            category: Restrict to one category
            active_only: If True, return only active fields

        Returns:
            List of applicant fields
        """
        stmt = select(ApplicantField)
        if category is not None:
            stmt = stmt.where(ApplicantField.category == category)
        if active_only:
            stmt = stmt.where(ApplicantField.is_active == True)
        stmt = stmt.order_by(
            ApplicantField.category, ApplicantField.display_order, ApplicantField.field_name
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_field_name(self, field_name: str) -> Optional[ApplicantField]:
        stmt = select(ApplicantField).where(ApplicantField.field_name == field_name)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_required(self) -> List[ApplicantField]:
        """Active fields every evaluated record must supply, in display order."""
        stmt = (
            select(ApplicantField)
            .where(ApplicantField.is_active == True, ApplicantField.is_required == True)
            .order_by(ApplicantField.display_order, ApplicantField.field_name)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
