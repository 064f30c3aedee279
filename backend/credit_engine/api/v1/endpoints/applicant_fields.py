"""Applicant field management endpoints."""

import logging
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from credit_engine.core.enums import FieldCategory
from credit_engine.core.exceptions import CreditEngineError
from credit_engine.deps import get_session
from credit_engine.models.schemas.applicant_field import (
    ApplicantFieldCreate,
    ApplicantFieldResponse,
    ApplicantFieldSeedResponse,
    ApplicantFieldUpdate,
)
from credit_engine.models.schemas.common import ActiveToggle
from credit_engine.services.applicant_field_service import ApplicantFieldService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=list[ApplicantFieldResponse],
    summary="List applicant fields",
    description="Retrieve applicant fields grouped by category, in display order",
)
async def list_fields(
    db: Annotated[AsyncSession, Depends(get_session)],
    category: Annotated[
        Optional[FieldCategory], Query(description="Return only this category")
    ] = None,
    active: Annotated[
        bool, Query(description="Return only active fields")
    ] = False,
) -> list[ApplicantFieldResponse]:
    """List applicant fields."""
    service = ApplicantFieldService(db)
    fields = await service.list_fields(
        category=category.value if category else None, active_only=active
    )
    return [ApplicantFieldResponse.model_validate(f) for f in fields]


@router.post(
    "",
    response_model=ApplicantFieldResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an applicant field",
    description="Register an input collected from applicants",
)
async def create_field(
    field_data: ApplicantFieldCreate,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ApplicantFieldResponse:
    """
    Create a new applicant field.

    Active required fields must be supplied in every record sent to /predict.
    """
    try:
        service = ApplicantFieldService(db)
        applicant_field = await service.create_field(**field_data.model_dump())
        return ApplicantFieldResponse.model_validate(applicant_field)

    except HTTPException:
        raise
    except CreditEngineError:
        raise
    except ValueError as e:
        logger.error(f"Validation error creating applicant field: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error creating applicant field: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create applicant field",
        )


@router.post(
    "/seed",
    response_model=ApplicantFieldSeedResponse,
    summary="Seed default applicant fields",
    description="Create or update the default applicant fields, matched by field name",
)
async def seed_fields(
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ApplicantFieldSeedResponse:
    """Install the default applicant fields."""
    try:
        service = ApplicantFieldService(db)
        created, updated, fields = await service.seed_defaults()
        return ApplicantFieldSeedResponse(
            created=created,
            updated=updated,
            fields=[ApplicantFieldResponse.model_validate(f) for f in fields],
        )

    except HTTPException:
        raise
    except CreditEngineError:
        raise
    except Exception as e:
        logger.error(f"Error seeding applicant fields: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to seed applicant fields",
        )


@router.get(
    "/{field_id}",
    response_model=ApplicantFieldResponse,
    summary="Get an applicant field",
    description="Retrieve an applicant field by ID",
)
async def get_field(
    field_id: UUID,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ApplicantFieldResponse:
    """Get an applicant field by ID."""
    service = ApplicantFieldService(db)
    applicant_field = await service.get_field(field_id)
    return ApplicantFieldResponse.model_validate(applicant_field)


@router.put(
    "/{field_id}",
    response_model=ApplicantFieldResponse,
    summary="Update an applicant field",
    description="Update applicant field properties",
)
async def update_field(
    field_id: UUID,
    update_data: ApplicantFieldUpdate,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ApplicantFieldResponse:
    """Update an applicant field."""
    try:
        service = ApplicantFieldService(db)
        applicant_field = await service.update_field(
            field_id, **update_data.model_dump(exclude_unset=True)
        )
        return ApplicantFieldResponse.model_validate(applicant_field)

    except HTTPException:
        raise
    except CreditEngineError:
        raise
    except ValueError as e:
        logger.error(f"Validation error updating applicant field {field_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error updating applicant field {field_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update applicant field",
        )


@router.patch(
    "/{field_id}",
    response_model=ApplicantFieldResponse,
    summary="Toggle an applicant field",
    description="Set the active flag, or flip it when no body is sent",
)
async def toggle_field(
    field_id: UUID,
    db: Annotated[AsyncSession, Depends(get_session)],
    toggle: Annotated[Optional[ActiveToggle], Body()] = None,
) -> ApplicantFieldResponse:
    """Activate or deactivate an applicant field."""
    service = ApplicantFieldService(db)
    applicant_field = await service.toggle_field(
        field_id, is_active=toggle.is_active if toggle else None
    )
    return ApplicantFieldResponse.model_validate(applicant_field)


@router.delete(
    "/{field_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an applicant field",
    description="Delete an applicant field",
)
async def delete_field(
    field_id: UUID,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> None:
    """Delete an applicant field."""
    service = ApplicantFieldService(db)
    await service.delete_field(field_id)
