"""Pydantic schemas for decisions and prediction history."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from credit_engine.models.schemas.rule import RuleExecutionResponse, RuleResultResponse
from credit_engine.models.schemas.scoring import ScoreInterpretationResponse


class FactorScoreResponse(BaseModel):
    """Points contributed by one scoring factor."""

    factor: str
    name: str
    category: str
    points: float
    max_points: float
    weight: float
    weighted_score: float
    details: dict[str, Any] = {}

    model_config = ConfigDict(from_attributes=True)


class DecisionResponse(BaseModel):
    """Decision for one applicant."""

    prediction_id: Optional[UUID] = None
    score: int
    approval_status: str
    risk_level: str
    base_score: int
    max_possible_score: int
    score_interpretation: ScoreInterpretationResponse
    scoring_breakdown: list[FactorScoreResponse]
    category_breakdown: dict[str, float]
    rule_results: list[RuleResultResponse]
    rules_applied: int
    flags: list[str]
    missing_factors: list[str] = []
    score_adjustment: Optional[float] = None
    limit_adjustment: Optional[float] = None
    limit_multiplier: Optional[float] = None
    features: dict[str, Any]
    model_version: str
    processing_time_ms: int
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True, protected_namespaces=())


class PredictionResponse(BaseModel):
    """Stored prediction summary."""

    id: UUID
    applicant_hash: str
    credit_score: int
    approval_status: str
    risk_level: str
    model_version: str
    processing_time_ms: int
    user_session: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True, protected_namespaces=())


class PredictionDetailResponse(PredictionResponse):
    """Stored prediction with the evaluated record and rule executions."""

    applicant_data: dict[str, Any]
    rule_executions: list[RuleExecutionResponse] = []

    model_config = ConfigDict(from_attributes=True, protected_namespaces=())


class PredictionListResponse(BaseModel):
    """Schema for paginated list of predictions."""

    items: list[PredictionResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
