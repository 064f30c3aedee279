"""Prediction history endpoints."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from credit_engine.deps import get_session
from credit_engine.models.schemas.prediction import (
    PredictionDetailResponse,
    PredictionListResponse,
    PredictionResponse,
)
from credit_engine.services.prediction_service import PredictionService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=PredictionListResponse,
    summary="List predictions",
    description="Retrieve recorded decisions, newest first, with pagination",
)
async def list_predictions(
    db: Annotated[AsyncSession, Depends(get_session)],
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    page_size: Annotated[
        int, Query(ge=1, le=100, description="Number of items per page")
    ] = 20,
) -> PredictionListResponse:
    """List recorded predictions with pagination."""
    service = PredictionService(db)

    skip = (page - 1) * page_size
    predictions, total = await service.list_predictions(skip=skip, limit=page_size)

    total_pages = (total + page_size - 1) // page_size if total > 0 else 1

    return PredictionListResponse(
        items=[PredictionResponse.model_validate(p) for p in predictions],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
    )


@router.get(
    "/{prediction_id}",
    response_model=PredictionDetailResponse,
    summary="Get prediction details",
    description="Retrieve a recorded decision with its applicant data and rule executions",
)
async def get_prediction(
    prediction_id: UUID,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> PredictionDetailResponse:
    """Get a recorded prediction by ID."""
    service = PredictionService(db)
    prediction = await service.get_prediction(prediction_id)
    return PredictionDetailResponse.model_validate(prediction)
