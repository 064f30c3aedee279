"""Pydantic schemas for API validation and serialization."""

from credit_engine.models.schemas.applicant import (
    ApplicantRecordRequest,
    LegacyApplicantData,
    RuleExecutionRequest,
)
from credit_engine.models.schemas.applicant_field import (
    ApplicantFieldCreate,
    ApplicantFieldResponse,
    ApplicantFieldSeedResponse,
    ApplicantFieldUpdate,
)
from credit_engine.models.schemas.common import ActiveToggle, PartialUpdate
from credit_engine.models.schemas.prediction import (
    DecisionResponse,
    FactorScoreResponse,
    PredictionDetailResponse,
    PredictionListResponse,
    PredictionResponse,
)
from credit_engine.models.schemas.rule import (
    RuleCreate,
    RuleDetailResponse,
    RuleEngineResponse,
    RuleExecutionResponse,
    RuleResponse,
    RuleResultResponse,
    RuleUpdate,
)
from credit_engine.models.schemas.scoring import (
    InterpretRequest,
    ScoreInterpretationResponse,
    ScoreRangeCreate,
    ScoreRangeImpactResponse,
    ScoreRangeResponse,
    ScoreRangeSeedResponse,
    ScoreRangeUpdate,
    ScoreRangeValidationResponse,
    ScoringConfigCreate,
    ScoringConfigResponse,
    ScoringConfigUpdate,
    ScoringSummaryResponse,
    ScoringTemplateApplyResponse,
    ScoringTemplateSummary,
)

__all__ = [
    # Shared schemas
    "ActiveToggle",
    "PartialUpdate",
    # Applicant field schemas
    "ApplicantFieldCreate",
    "ApplicantFieldResponse",
    "ApplicantFieldSeedResponse",
    "ApplicantFieldUpdate",
    # Applicant schemas
    "ApplicantRecordRequest",
    "LegacyApplicantData",
    "RuleExecutionRequest",
    # Decision schemas
    "DecisionResponse",
    "FactorScoreResponse",
    "PredictionResponse",
    "PredictionDetailResponse",
    "PredictionListResponse",
    # Rule schemas
    "RuleCreate",
    "RuleUpdate",
    "RuleResponse",
    "RuleDetailResponse",
    "RuleExecutionResponse",
    "RuleResultResponse",
    "RuleEngineResponse",
    # Scoring schemas
    "ScoringConfigCreate",
    "ScoringConfigUpdate",
    "ScoringConfigResponse",
    "ScoringSummaryResponse",
    "ScoringTemplateSummary",
    "ScoringTemplateApplyResponse",
    "ScoreRangeCreate",
    "ScoreRangeUpdate",
    "ScoreRangeResponse",
    "ScoreRangeValidationResponse",
    "ScoreRangeSeedResponse",
    "ScoreRangeImpactResponse",
    "InterpretRequest",
    "ScoreInterpretationResponse",
]
