"""Credit decision endpoint."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from credit_engine.core.exceptions import CreditEngineError
from credit_engine.core.rate_limit import RateLimiter, enforce_rate_limit
from credit_engine.deps import get_rate_limiter, get_session
from credit_engine.models.schemas.applicant import ApplicantRecordRequest
from credit_engine.models.schemas.prediction import DecisionResponse
from credit_engine.services.prediction_service import PredictionService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/predict",
    response_model=DecisionResponse,
    summary="Evaluate an applicant",
    description=(
        "Score an applicant record against the active scoring factors, "
        "interpret the score against the active ranges and apply the active rules"
    ),
)
async def predict(
    request: Request,
    applicant: ApplicantRecordRequest,
    db: Annotated[AsyncSession, Depends(get_session)],
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
    x_session_id: Annotated[Optional[str], Header()] = None,
) -> DecisionResponse:
    """
    Evaluate an applicant.

    The decision includes:
    - Final score clamped to 300-850 after rule adjustments
    - Approval status and risk level (rule overrides win over the range)
    - Per-factor and per-category score breakdown
    - Per-rule results and collected review flags
    - Active factors the record did not supply

    The outcome is recorded in the prediction history; if that write fails
    the decision is still returned, without a prediction_id.
    """
    await enforce_rate_limit(request, limiter, scope="predict")

    try:
        service = PredictionService(db)
        decision = await service.predict(applicant.root, user_session=x_session_id)
        return DecisionResponse.model_validate(decision)

    except HTTPException:
        raise
    except CreditEngineError:
        raise
    except Exception as e:
        logger.error(f"Error evaluating applicant: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to evaluate applicant",
        )
