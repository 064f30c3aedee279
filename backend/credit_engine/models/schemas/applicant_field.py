"""Pydantic schemas for configurable applicant fields."""

import json
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from credit_engine.core.enums import FieldCategory, FieldType
from credit_engine.models.schemas.common import PartialUpdate


def _decode_json(value: Any, name: str) -> Any:
    """Options and validation rules may arrive as JSON strings."""
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError(f"{name} is not valid JSON: {e.msg}")
    return value


def _check_validation_rules(rules: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    if not rules:
        return rules
    bounds = {}
    for key in ("min", "max"):
        if key in rules and rules[key] is not None:
            if isinstance(rules[key], bool) or not isinstance(rules[key], (int, float)):
                raise ValueError(f"validation_rules.{key} must be a number")
            bounds[key] = rules[key]
    if "min" in bounds and "max" in bounds and bounds["max"] < bounds["min"]:
        raise ValueError("validation_rules.max cannot be lower than validation_rules.min")
    return rules


class ApplicantFieldBase(BaseModel):
    """Base schema for an applicant field."""

    field_name: str = Field(
        ..., min_length=1, max_length=100, description="Key in the applicant record (e.g., 'age')"
    )
    display_name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    field_type: FieldType
    category: FieldCategory = FieldCategory.PERSONAL
    is_required: bool = False
    validation_rules: Optional[dict[str, Any]] = Field(
        None, description="Input bounds (e.g., {'min': 18, 'max': 100})"
    )
    options: Optional[list[str]] = Field(None, description="Choices for select and radio fields")
    default_value: Optional[str] = Field(None, max_length=255)
    placeholder: Optional[str] = Field(None, max_length=255)
    help_text: Optional[str] = None
    display_order: int = Field(default=0, ge=0)
    scoring_weight: Optional[float] = Field(None, ge=0, le=10)
    is_active: bool = True

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("validation_rules", mode="before")
    @classmethod
    def decode_validation_rules(cls, value: Any) -> Any:
        return _decode_json(value, "validation_rules")

    @field_validator("validation_rules")
    @classmethod
    def check_validation_rules(cls, value: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
        return _check_validation_rules(value)

    @field_validator("options", mode="before")
    @classmethod
    def decode_options(cls, value: Any) -> Any:
        return _decode_json(value, "options")


class ApplicantFieldCreate(ApplicantFieldBase):
    """Schema for creating an applicant field."""

    @model_validator(mode="after")
    def check_options(self) -> "ApplicantFieldCreate":
        if FieldType(self.field_type).has_options and not self.options:
            raise ValueError(f"{self.field_type} fields need at least one option")
        return self


class ApplicantFieldUpdate(PartialUpdate):
    """Schema for updating an applicant field (all fields optional)."""

    required_columns = frozenset(
        {
            "field_name",
            "display_name",
            "field_type",
            "category",
            "is_required",
            "display_order",
            "is_active",
        }
    )

    field_name: Optional[str] = Field(None, min_length=1, max_length=100)
    display_name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    field_type: Optional[FieldType] = None
    category: Optional[FieldCategory] = None
    is_required: Optional[bool] = None
    validation_rules: Optional[dict[str, Any]] = None
    options: Optional[list[str]] = None
    default_value: Optional[str] = Field(None, max_length=255)
    placeholder: Optional[str] = Field(None, max_length=255)
    help_text: Optional[str] = None
    display_order: Optional[int] = Field(None, ge=0)
    scoring_weight: Optional[float] = Field(None, ge=0, le=10)
    is_active: Optional[bool] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("validation_rules", mode="before")
    @classmethod
    def decode_validation_rules(cls, value: Any) -> Any:
        return _decode_json(value, "validation_rules")

    @field_validator("validation_rules")
    @classmethod
    def check_validation_rules(cls, value: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
        return _check_validation_rules(value)

    @field_validator("options", mode="before")
    @classmethod
    def decode_options(cls, value: Any) -> Any:
        return _decode_json(value, "options")


class ApplicantFieldResponse(ApplicantFieldBase):
    """Schema for applicant field response."""

    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class ApplicantFieldSeedResponse(BaseModel):
    created: int
    updated: int
    fields: list[ApplicantFieldResponse]
