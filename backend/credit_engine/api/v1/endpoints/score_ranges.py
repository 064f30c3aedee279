"""Score range management endpoints."""

import logging
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from credit_engine.core.exceptions import CreditEngineError
from credit_engine.deps import get_session
from credit_engine.models.schemas.common import ActiveToggle
from credit_engine.models.schemas.scoring import (
    InterpretRequest,
    ScoreInterpretationResponse,
    ScoreRangeCreate,
    ScoreRangeImpactResponse,
    ScoreRangeResponse,
    ScoreRangeSeedResponse,
    ScoreRangeUpdate,
    ScoreRangeValidationResponse,
)
from credit_engine.services.score_range_service import ScoreRangeService

logger = logging.getLogger(__name__)

router = APIRouter()


# ==================== Range Set Endpoints ====================


@router.get(
    "",
    response_model=list[ScoreRangeResponse],
    summary="List score ranges",
    description="Retrieve score ranges ordered from the highest scores down",
)
async def list_ranges(
    db: Annotated[AsyncSession, Depends(get_session)],
    active: Annotated[
        bool, Query(description="Return only active ranges")
    ] = False,
) -> list[ScoreRangeResponse]:
    """List score ranges."""
    service = ScoreRangeService(db)
    ranges = await service.list_ranges(active_only=active)
    return [ScoreRangeResponse.model_validate(score_range) for score_range in ranges]


@router.post(
    "",
    response_model=ScoreRangeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a score range",
    description="Create a score tier with its business outcome",
)
async def create_range(
    range_data: ScoreRangeCreate,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ScoreRangeResponse:
    """
    Create a new score range.

    Overlapping or gapped range sets are accepted; use /validate to inspect them.
    """
    try:
        service = ScoreRangeService(db)
        score_range = await service.create_range(**range_data.model_dump())
        return ScoreRangeResponse.model_validate(score_range)

    except HTTPException:
        raise
    except CreditEngineError:
        raise
    except ValueError as e:
        logger.error(f"Validation error creating score range: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error creating score range: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create score range",
        )


@router.get(
    "/validate",
    response_model=ScoreRangeValidationResponse,
    summary="Validate score ranges",
    description="Report overlaps and gaps in the active ranges across 300-850",
)
async def validate_ranges(
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ScoreRangeValidationResponse:
    """Check the active ranges for overlaps and uncovered scores."""
    service = ScoreRangeService(db)
    validation = await service.validate_ranges()
    return ScoreRangeValidationResponse.model_validate(validation)


@router.post(
    "/seed",
    response_model=ScoreRangeSeedResponse,
    summary="Seed default score ranges",
    description="Create or update the five default tiers, matched by name",
)
async def seed_ranges(
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ScoreRangeSeedResponse:
    """Install the default score ranges."""
    try:
        service = ScoreRangeService(db)
        created, updated, ranges = await service.seed_defaults()
        return ScoreRangeSeedResponse(
            created=created,
            updated=updated,
            ranges=[ScoreRangeResponse.model_validate(r) for r in ranges],
        )

    except HTTPException:
        raise
    except CreditEngineError:
        raise
    except Exception as e:
        logger.error(f"Error seeding score ranges: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to seed score ranges",
        )


@router.get(
    "/impact",
    response_model=ScoreRangeImpactResponse,
    summary="Score range business impact",
    description="Coverage and approval/risk distribution of the active ranges",
)
async def range_impact(
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ScoreRangeImpactResponse:
    """Summarize the business outcome of the active ranges."""
    service = ScoreRangeService(db)
    impact = await service.impact()
    return ScoreRangeImpactResponse(**impact)


@router.post(
    "/interpret",
    response_model=ScoreInterpretationResponse,
    summary="Interpret a score",
    description="Resolve a score to its range and business outcome",
)
async def interpret_score(
    interpret_request: InterpretRequest,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ScoreInterpretationResponse:
    """Interpret a score against the active ranges."""
    service = ScoreRangeService(db)
    interpretation = await service.interpret(interpret_request.score)
    return ScoreInterpretationResponse.model_validate(interpretation)


# ==================== Single Range Endpoints ====================


@router.get(
    "/{range_id}",
    response_model=ScoreRangeResponse,
    summary="Get a score range",
    description="Retrieve a score range by ID",
)
async def get_range(
    range_id: UUID,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ScoreRangeResponse:
    """Get a score range by ID."""
    service = ScoreRangeService(db)
    score_range = await service.get_range(range_id)
    return ScoreRangeResponse.model_validate(score_range)


@router.put(
    "/{range_id}",
    response_model=ScoreRangeResponse,
    summary="Update a score range",
    description="Update score range fields",
)
async def update_range(
    range_id: UUID,
    update_data: ScoreRangeUpdate,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ScoreRangeResponse:
    """Update a score range."""
    try:
        service = ScoreRangeService(db)
        score_range = await service.update_range(
            range_id, **update_data.model_dump(exclude_unset=True)
        )
        return ScoreRangeResponse.model_validate(score_range)

    except HTTPException:
        raise
    except CreditEngineError:
        raise
    except ValueError as e:
        logger.error(f"Validation error updating score range {range_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error updating score range {range_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update score range",
        )


@router.patch(
    "/{range_id}",
    response_model=ScoreRangeResponse,
    summary="Toggle a score range",
    description="Set the active flag, or flip it when no body is sent",
)
async def toggle_range(
    range_id: UUID,
    db: Annotated[AsyncSession, Depends(get_session)],
    toggle: Annotated[Optional[ActiveToggle], Body()] = None,
) -> ScoreRangeResponse:
    """Activate or deactivate a score range."""
    service = ScoreRangeService(db)
    score_range = await service.toggle_range(
        range_id, is_active=toggle.is_active if toggle else None
    )
    return ScoreRangeResponse.model_validate(score_range)


@router.delete(
    "/{range_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a score range",
    description="Delete a score range",
)
async def delete_range(
    range_id: UUID,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> None:
    """Delete a score range."""
    service = ScoreRangeService(db)
    await service.delete_range(range_id)
