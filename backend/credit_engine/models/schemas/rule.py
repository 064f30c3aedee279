"""Pydantic schemas for business rules and rule executions."""

import json
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from credit_engine.core.enums import RuleAction, RuleType
from credit_engine.models.schemas.common import PartialUpdate
from credit_engine.services.engine.base import ActionPayload, Condition


def _decode_json(value: Any, name: str) -> Any:
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError(f"{name} is not valid JSON: {e.msg}")
    return value


def _normalize_condition(value: Any) -> Optional[dict[str, Any]]:
    if value is None:
        return None
    return Condition.parse(value).to_dict()


# ==================== Rule Schemas ====================


class RuleBase(BaseModel):
    """Base schema for a rule with common fields."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    type: RuleType
    category: str = Field(default="general", min_length=1, max_length=100)
    condition: dict[str, Any] = Field(
        ...,
        description="Condition (e.g., {'field': 'creditScore', 'operator': '>', 'value': 700})",
    )
    action: RuleAction
    action_value: Optional[dict[str, Any]] = Field(
        None,
        description="Action payload (e.g., {'adjustment': 5, 'reason': 'Strong bureau score'})",
    )
    priority: int = Field(default=5, ge=1, le=10, description="Higher priority rules run first")
    weight: float = Field(default=1.0, ge=0.1, le=3.0)
    is_active: bool = True

    model_config = ConfigDict(use_enum_values=True)


class RuleCreate(RuleBase):
    """Schema for creating a rule; condition and action payload are parsed up front."""

    @field_validator("condition", mode="before")
    @classmethod
    def parse_condition(cls, value: Any) -> Any:
        return _normalize_condition(_decode_json(value, "condition"))

    @field_validator("action_value", mode="before")
    @classmethod
    def decode_action_value(cls, value: Any) -> Any:
        return _decode_json(value, "action_value")

    @model_validator(mode="after")
    def check_action_payload(self) -> "RuleCreate":
        ActionPayload.parse(RuleAction(self.action), self.action_value)
        return self


class RuleUpdate(PartialUpdate):
    """Schema for updating a rule (all fields optional)."""

    required_columns = frozenset(
        {"name", "type", "category", "condition", "action", "priority", "weight", "is_active"}
    )

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    type: Optional[RuleType] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    condition: Optional[dict[str, Any]] = None
    action: Optional[RuleAction] = None
    action_value: Optional[dict[str, Any]] = None
    priority: Optional[int] = Field(None, ge=1, le=10)
    weight: Optional[float] = Field(None, ge=0.1, le=3.0)
    is_active: Optional[bool] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("condition", mode="before")
    @classmethod
    def parse_condition(cls, value: Any) -> Any:
        return _normalize_condition(_decode_json(value, "condition"))

    @field_validator("action_value", mode="before")
    @classmethod
    def decode_action_value(cls, value: Any) -> Any:
        return _decode_json(value, "action_value")


class RuleResponse(RuleBase):
    """Schema for rule response."""

    id: UUID
    action_value: Optional[dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ==================== Rule Execution Schemas ====================


class RuleExecutionResponse(BaseModel):
    """Stored rule execution."""

    id: UUID
    prediction_id: UUID
    rule_id: UUID
    triggered: bool
    result: Optional[dict[str, Any]] = None
    score_adjustment: Optional[float] = None
    status_override: Optional[str] = None
    limit_adjustment: Optional[float] = None
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class RuleDetailResponse(RuleResponse):
    """Schema for rule response with its latest executions."""

    recent_executions: list[RuleExecutionResponse] = []

    model_config = ConfigDict(from_attributes=True)


class RuleResultResponse(BaseModel):
    """Outcome of one rule for one applicant."""

    rule_id: Optional[UUID] = None
    rule_name: str
    triggered: bool
    action: str
    result: dict[str, Any] = {}
    score_adjustment: Optional[float] = None
    status_override: Optional[str] = None
    limit_adjustment: Optional[float] = None
    limit_multiplier: Optional[float] = None
    flag: Optional[str] = None
    error: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class RuleEngineResponse(BaseModel):
    """Aggregated outcome of a rule engine run."""

    results: list[RuleResultResponse]
    triggered_count: int
    final_score_adjustment: Optional[float] = None
    final_status_override: Optional[str] = None
    final_limit_adjustment: Optional[float] = None
    final_limit_multiplier: Optional[float] = None
    flags: list[str] = []

    model_config = ConfigDict(from_attributes=True)
