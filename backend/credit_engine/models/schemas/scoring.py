"""Pydantic schemas for scoring factors and score ranges."""

import json
from datetime import datetime
from typing import Any, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from credit_engine.core.enums import ApprovalStatus, CalculationType, RiskLevel
from credit_engine.models.schemas.common import PartialUpdate

SCORE_MIN = 300
SCORE_MAX = 850

Thresholds = Union[dict[str, Any], list[dict[str, Any]]]


def _decode_thresholds(value: Any) -> Any:
    """Thresholds may arrive as a JSON string."""
    if isinstance(value, str):
        if not value.strip():
            return {}
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError(f"thresholds is not valid JSON: {e.msg}")
    return value


# ==================== Scoring Config Schemas ====================


class ScoringConfigBase(BaseModel):
    """Base schema for a scoring factor."""

    factor: str = Field(..., min_length=1, max_length=100, description="Applicant record field (e.g., 'annualIncome')")
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category: str = Field(default="general", min_length=1, max_length=50)
    max_points: float = Field(..., description="Maximum points; negative for penalty factors")
    weight: float = Field(default=1.0, ge=0.1, le=3.0)
    calculation_type: CalculationType = CalculationType.LINEAR
    thresholds: Thresholds = Field(
        default_factory=dict,
        description="Calculation parameters (e.g., {'multiplier': 2, 'cap': 100000, 'scale': 1000})",
    )
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    optimal_value: Optional[float] = None
    config_type: str = Field(default="static", max_length=20)
    is_active: bool = True

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("thresholds", mode="before")
    @classmethod
    def decode_thresholds(cls, value: Any) -> Any:
        return _decode_thresholds(value)


class ScoringConfigCreate(ScoringConfigBase):
    """Schema for creating a scoring factor."""

    pass


class ScoringConfigUpdate(PartialUpdate):
    """Schema for updating a scoring factor (all fields optional)."""

    required_columns = frozenset(
        {
            "factor",
            "name",
            "category",
            "max_points",
            "weight",
            "calculation_type",
            "thresholds",
            "config_type",
            "is_active",
        }
    )

    factor: Optional[str] = Field(None, min_length=1, max_length=100)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    max_points: Optional[float] = None
    weight: Optional[float] = Field(None, ge=0.1, le=3.0)
    calculation_type: Optional[CalculationType] = None
    thresholds: Optional[Thresholds] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    optimal_value: Optional[float] = None
    config_type: Optional[str] = Field(None, max_length=20)
    is_active: Optional[bool] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("thresholds", mode="before")
    @classmethod
    def decode_thresholds(cls, value: Any) -> Any:
        return _decode_thresholds(value)


class ScoringConfigResponse(ScoringConfigBase):
    """Schema for scoring factor response."""

    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ScoringTemplateSummary(BaseModel):
    """A named set of factor configurations."""

    id: str
    name: str
    description: str
    config_count: int


class ScoringTemplateApplyResponse(BaseModel):
    template: ScoringTemplateSummary
    configs: list[ScoringConfigResponse]


class ScoringSummaryResponse(BaseModel):
    """Totals over the active factors."""

    active_factors: int
    total_max_points: float
    total_max_weighted_points: float
    max_possible_score: int
    categories: dict[str, int]


# ==================== Score Range Schemas ====================


class ScoreRangeBase(BaseModel):
    """Base schema for a score range."""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    min_score: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    max_score: Optional[int] = Field(None, ge=SCORE_MIN, le=SCORE_MAX, description="Absent means unbounded above")
    color: Optional[str] = Field(None, max_length=20, description="Display color tag (e.g., '#10B981')")
    approval_status: Optional[ApprovalStatus] = None
    risk_level: Optional[RiskLevel] = None
    interest_rate_adjustment: float = Field(default=0.0, ge=-10, le=10, description="Percentage points")
    loan_limit_adjustment: float = Field(default=1.0, ge=0, le=5, description="Loan limit multiplier")
    priority: int = Field(default=1, ge=1, le=10, description="Lowest wins when ranges overlap")
    is_active: bool = True

    model_config = ConfigDict(use_enum_values=True)

    @model_validator(mode="after")
    def check_bounds(self) -> "ScoreRangeBase":
        if self.max_score is not None and self.max_score < self.min_score:
            raise ValueError("max_score cannot be lower than min_score")
        return self


class ScoreRangeCreate(ScoreRangeBase):
    """Schema for creating a score range."""

    pass


class ScoreRangeUpdate(PartialUpdate):
    """Schema for updating a score range (all fields optional)."""

    required_columns = frozenset(
        {
            "name",
            "min_score",
            "interest_rate_adjustment",
            "loan_limit_adjustment",
            "priority",
            "is_active",
        }
    )

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    min_score: Optional[int] = Field(None, ge=SCORE_MIN, le=SCORE_MAX)
    max_score: Optional[int] = Field(None, ge=SCORE_MIN, le=SCORE_MAX)
    color: Optional[str] = Field(None, max_length=20)
    approval_status: Optional[ApprovalStatus] = None
    risk_level: Optional[RiskLevel] = None
    interest_rate_adjustment: Optional[float] = Field(None, ge=-10, le=10)
    loan_limit_adjustment: Optional[float] = Field(None, ge=0, le=5)
    priority: Optional[int] = Field(None, ge=1, le=10)
    is_active: Optional[bool] = None

    model_config = ConfigDict(use_enum_values=True)

    @model_validator(mode="after")
    def check_bounds(self) -> "ScoreRangeUpdate":
        if (
            self.min_score is not None
            and self.max_score is not None
            and self.max_score < self.min_score
        ):
            raise ValueError("max_score cannot be lower than min_score")
        return self


class ScoreRangeResponse(BaseModel):
    """Schema for score range response."""

    id: UUID
    name: str
    description: Optional[str] = None
    min_score: int
    max_score: Optional[int] = None
    color: Optional[str] = None
    approval_status: Optional[str] = None
    risk_level: Optional[str] = None
    interest_rate_adjustment: float
    loan_limit_adjustment: float
    priority: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RangeReference(BaseModel):
    """Compact range identity used in validation reports."""

    id: Optional[UUID] = None
    name: str
    min_score: float
    max_score: Optional[float] = None
    priority: int

    model_config = ConfigDict(from_attributes=True)


class RangeOverlapResponse(BaseModel):
    range1: RangeReference
    range2: RangeReference

    model_config = ConfigDict(from_attributes=True)


class RangeGapResponse(BaseModel):
    min: float
    max: float

    model_config = ConfigDict(from_attributes=True)


class ScoreRangeValidationResponse(BaseModel):
    """Overlaps and gaps in the active range set."""

    is_valid: bool
    overlaps: list[RangeOverlapResponse]
    gaps: list[RangeGapResponse]

    model_config = ConfigDict(from_attributes=True)


class ScoreRangeSeedResponse(BaseModel):
    created: int
    updated: int
    ranges: list[ScoreRangeResponse]


class ScoreRangeImpactResponse(BaseModel):
    """Coverage and outcome distribution of the configured ranges."""

    total_ranges: int
    active_ranges: int
    score_coverage: Optional[dict[str, float]] = None
    approval_distribution: dict[str, int]
    risk_distribution: dict[str, int]


class InterpretRequest(BaseModel):
    score: int = Field(..., description="Total score to interpret")


class RangeSummaryResponse(BaseModel):
    name: str
    description: Optional[str] = None
    min_score: float
    max_score: Optional[float] = None
    color: str

    model_config = ConfigDict(from_attributes=True)


class ScoreInterpretationResponse(BaseModel):
    """Business outcome attached to a score."""

    range: RangeSummaryResponse
    approval_status: str
    risk_level: str
    interest_rate_adjustment: float
    loan_limit_adjustment: float
    color: str

    model_config = ConfigDict(from_attributes=True)
