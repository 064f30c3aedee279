"""Applicant field configuration service."""

import logging
from typing import Any, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from credit_engine.core.enums import FieldType
from credit_engine.core.exceptions import NotFoundError
from credit_engine.models.domain.applicant_field import ApplicantField
from credit_engine.repositories.applicant_field_repository import ApplicantFieldRepository
from credit_engine.services.defaults import DEFAULT_APPLICANT_FIELDS

logger = logging.getLogger(__name__)


class ApplicantFieldService:
    """
    Applicant field service for managing the inputs collected from applicants.

    Active fields marked ``is_required`` must be present and non-empty in
    every record sent for evaluation.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the applicant field service.

        Args:
            db: Async database session
        """
        self.db = db
        self.repo = ApplicantFieldRepository(db)

    async def list_fields(
        self, category: Optional[str] = None, active_only: bool = False
    ) -> List[ApplicantField]:
        return await self.repo.get_fields(category=category, active_only=active_only)

    async def get_field(self, field_id: UUID) -> ApplicantField:
        """
        Retrieve an applicant field by ID.

        Raises:
            NotFoundError: If the field does not exist
        """
        applicant_field = await self.repo.get_by_id(field_id)
        if not applicant_field:
            raise NotFoundError(f"Applicant field with ID {field_id} not found")
        return applicant_field

    async def create_field(self, **fields: Any) -> ApplicantField:
        """
        Create an applicant field.

        Raises:
            ValueError: If a field with the same name exists
        """
        existing = await self.repo.get_by_field_name(fields["field_name"])
        if existing:
            raise ValueError(f"Field with name '{fields['field_name']}' already exists")

        applicant_field = await self.repo.create(**fields)
        await self.db.commit()
        await self.db.refresh(applicant_field)

        logger.info(
            f"Created applicant field '{applicant_field.field_name}' "
            f"({applicant_field.field_type}, required={applicant_field.is_required})"
        )
        return applicant_field

    async def update_field(self, field_id: UUID, **fields: Any) -> ApplicantField:
        """
        Update an applicant field.

        Raises:
            NotFoundError: If the field does not exist
            ValueError: If the new name exists or a choice field loses its options
        """
        applicant_field = await self.get_field(field_id)

        new_name = fields.get("field_name")
        if new_name and new_name != applicant_field.field_name:
            existing = await self.repo.get_by_field_name(new_name)
            if existing:
                raise ValueError(f"Field with name '{new_name}' already exists")

        field_type = fields.get("field_type", applicant_field.field_type)
        options = fields.get("options", applicant_field.options)
        if FieldType(field_type).has_options and not options:
            raise ValueError(f"{field_type} fields need at least one option")

        applicant_field = await self.repo.update(applicant_field, **fields)
        await self.db.commit()
        await self.db.refresh(applicant_field)
        return applicant_field

    async def toggle_field(
        self, field_id: UUID, is_active: Optional[bool] = None
    ) -> ApplicantField:
        """
        Set or flip the active flag of an applicant field.

        Raises:
            NotFoundError: If the field does not exist
        """
        applicant_field = await self.get_field(field_id)
        applicant_field.is_active = (
            (not applicant_field.is_active) if is_active is None else is_active
        )
        await self.db.commit()
        await self.db.refresh(applicant_field)
        return applicant_field

    async def delete_field(self, field_id: UUID) -> None:
        """
        Delete an applicant field.

        Raises:
            NotFoundError: If the field does not exist
        """
        deleted = await self.repo.delete(field_id)
        if not deleted:
            raise NotFoundError(f"Applicant field with ID {field_id} not found")
        await self.db.commit()

    async def seed_defaults(self) -> Tuple[int, int, List[ApplicantField]]:
        """
        Create or update the default applicant fields, matched by field name.

        Fields with other names are left untouched.

        Returns:
            (created count, updated count, seeded fields)
        """
        created = 0
        updated = 0
        seeded = []

        for defaults in DEFAULT_APPLICANT_FIELDS:
            existing = await self.repo.get_by_field_name(defaults["field_name"])
            if existing:
                seeded.append(await self.repo.update(existing, is_active=True, **defaults))
                updated += 1
            else:
                seeded.append(await self.repo.create(**defaults))
                created += 1

        await self.db.commit()
        for applicant_field in seeded:
            await self.db.refresh(applicant_field)

        logger.info(f"Seeded default applicant fields: {created} created, {updated} updated")
        return created, updated, seeded
