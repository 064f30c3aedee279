"""Scoring factor configuration endpoints."""

import logging
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from credit_engine.core.exceptions import CreditEngineError
from credit_engine.deps import get_session
from credit_engine.models.schemas.common import ActiveToggle
from credit_engine.models.schemas.scoring import (
    ScoringConfigCreate,
    ScoringConfigResponse,
    ScoringConfigUpdate,
    ScoringSummaryResponse,
    ScoringTemplateApplyResponse,
    ScoringTemplateSummary,
)
from credit_engine.services.scoring_config_service import ScoringConfigService

logger = logging.getLogger(__name__)

router = APIRouter()


# ==================== Factor Set Endpoints ====================


@router.get(
    "",
    response_model=list[ScoringConfigResponse],
    summary="List scoring factors",
    description="Retrieve scoring factors ordered by category and name",
)
async def list_configs(
    db: Annotated[AsyncSession, Depends(get_session)],
    active_only: Annotated[
        bool, Query(description="Return only active factors")
    ] = False,
) -> list[ScoringConfigResponse]:
    """List scoring factors."""
    service = ScoringConfigService(db)
    configs = await service.list_configs(active_only=active_only)
    return [ScoringConfigResponse.model_validate(config) for config in configs]


@router.post(
    "",
    response_model=ScoringConfigResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a scoring factor",
    description="Create a scoring factor with its calculation strategy",
)
async def create_config(
    config_data: ScoringConfigCreate,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ScoringConfigResponse:
    """
    Create a new scoring factor.

    Supported calculation types:
    - linear: proportional between min_value and max_value
    - threshold: stepped points from {"ranges": [{"min", "max", "points"}]}
    - categorical: points looked up by value, with an optional "default"
    - optimal: full points at optimal_value, falling off linearly
    """
    try:
        service = ScoringConfigService(db)
        config = await service.create_config(**config_data.model_dump())
        return ScoringConfigResponse.model_validate(config)

    except HTTPException:
        raise
    except CreditEngineError:
        raise
    except ValueError as e:
        logger.error(f"Validation error creating scoring config: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error creating scoring config: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create scoring config",
        )


@router.post(
    "/seed",
    response_model=list[ScoringConfigResponse],
    summary="Seed default scoring factors",
    description="Replace every scoring factor with the nine default factors",
)
async def seed_configs(
    db: Annotated[AsyncSession, Depends(get_session)],
) -> list[ScoringConfigResponse]:
    """Install the default scoring factors."""
    try:
        service = ScoringConfigService(db)
        configs = await service.seed_defaults()
        return [ScoringConfigResponse.model_validate(config) for config in configs]

    except HTTPException:
        raise
    except CreditEngineError:
        raise
    except Exception as e:
        logger.error(f"Error seeding scoring configs: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to seed scoring configs",
        )


@router.get(
    "/templates",
    response_model=list[ScoringTemplateSummary],
    summary="List scoring templates",
    description="Available factor templates (conservative, balanced, aggressive)",
)
async def list_templates(
    db: Annotated[AsyncSession, Depends(get_session)],
) -> list[ScoringTemplateSummary]:
    """List scoring templates."""
    service = ScoringConfigService(db)
    return [ScoringTemplateSummary(**template) for template in service.list_templates()]


@router.post(
    "/templates/{template_id}/apply",
    response_model=ScoringTemplateApplyResponse,
    summary="Apply a scoring template",
    description="Create or update the template's factors, matched by factor key",
)
async def apply_template(
    template_id: str,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ScoringTemplateApplyResponse:
    """Apply a scoring template to the factor set."""
    try:
        service = ScoringConfigService(db)
        template, configs = await service.apply_template(template_id)
        return ScoringTemplateApplyResponse(
            template=ScoringTemplateSummary(**template),
            configs=[ScoringConfigResponse.model_validate(config) for config in configs],
        )

    except HTTPException:
        raise
    except CreditEngineError:
        raise
    except ValueError as e:
        logger.error(f"Error applying scoring template '{template_id}': {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error applying scoring template '{template_id}': {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to apply scoring template",
        )


@router.get(
    "/summary",
    response_model=ScoringSummaryResponse,
    summary="Scoring summary",
    description="Totals over the active factors, including the highest reachable score",
)
async def scoring_summary(
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ScoringSummaryResponse:
    """Summarize the active scoring factors."""
    service = ScoringConfigService(db)
    summary = await service.summary()
    return ScoringSummaryResponse(**summary)


# ==================== Single Factor Endpoints ====================


@router.get(
    "/{config_id}",
    response_model=ScoringConfigResponse,
    summary="Get a scoring factor",
    description="Retrieve a scoring factor by ID",
)
async def get_config(
    config_id: UUID,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ScoringConfigResponse:
    """Get a scoring factor by ID."""
    service = ScoringConfigService(db)
    config = await service.get_config(config_id)
    return ScoringConfigResponse.model_validate(config)


@router.put(
    "/{config_id}",
    response_model=ScoringConfigResponse,
    summary="Update a scoring factor",
    description="Update scoring factor fields; the merged factor is re-validated",
)
async def update_config(
    config_id: UUID,
    update_data: ScoringConfigUpdate,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> ScoringConfigResponse:
    """Update a scoring factor."""
    try:
        service = ScoringConfigService(db)
        config = await service.update_config(
            config_id, **update_data.model_dump(exclude_unset=True)
        )
        return ScoringConfigResponse.model_validate(config)

    except HTTPException:
        raise
    except CreditEngineError:
        raise
    except ValueError as e:
        logger.error(f"Validation error updating scoring config {config_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error updating scoring config {config_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update scoring config",
        )


@router.patch(
    "/{config_id}",
    response_model=ScoringConfigResponse,
    summary="Toggle a scoring factor",
    description="Set the active flag, or flip it when no body is sent",
)
async def toggle_config(
    config_id: UUID,
    db: Annotated[AsyncSession, Depends(get_session)],
    toggle: Annotated[Optional[ActiveToggle], Body()] = None,
) -> ScoringConfigResponse:
    """Activate or deactivate a scoring factor."""
    service = ScoringConfigService(db)
    config = await service.toggle_config(
        config_id, is_active=toggle.is_active if toggle else None
    )
    return ScoringConfigResponse.model_validate(config)


@router.delete(
    "/{config_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a scoring factor",
    description="Delete a scoring factor",
)
async def delete_config(
    config_id: UUID,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> None:
    """Delete a scoring factor."""
    service = ScoringConfigService(db)
    await service.delete_config(config_id)
