"""API v1 router configuration."""

from fastapi import APIRouter

from credit_engine.api.v1.endpoints import (
    applicant_fields,
    health,
    predict,
    predictions,
    rules,
    score_ranges,
    scoring_config,
)

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    health.router,
    tags=["health"],
)

api_router.include_router(
    predict.router,
    tags=["predict"],
)

api_router.include_router(
    predictions.router,
    prefix="/predictions",
    tags=["predictions"],
)

api_router.include_router(
    rules.router,
    prefix="/rules",
    tags=["rules"],
)

api_router.include_router(
    score_ranges.router,
    prefix="/score-range",
    tags=["score-range"],
)

api_router.include_router(
    scoring_config.router,
    prefix="/scoring-config",
    tags=["scoring-config"],
)

api_router.include_router(
    applicant_fields.router,
    prefix="/applicant-fields",
    tags=["applicant-fields"],
)
