"""Scoring factor and score range configuration models."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from credit_engine.db.base import BaseModel, JSONType


class ScoringConfig(BaseModel):
    """One scoring dimension mapped onto an applicant field."""

    __tablename__ = "scoring_configs"

    # Factor Identification
    factor: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(
        String(50), nullable=False, default="general", index=True
    )  # e.g., "financial", "credit", "demographic"

    # Points & Weighting
    max_points: Mapped[Decimal] = mapped_column(
        Numeric(8, 2), nullable=False
    )  # Negative for penalty factors
    weight: Mapped[Decimal] = mapped_column(
        Numeric(4, 2), nullable=False, default=Decimal("1.00")
    )

    # Calculation
    calculation_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="linear"
    )
    config_type: Mapped[str] = mapped_column(String(20), nullable=False, default="static")

    # Calculation-specific parameters (JSON)
    # Examples:
    # - linear:      {"multiplier": 2, "cap": 100000, "scale": 1000}
    # - threshold:   {"excellent": {"max": 0.3, "points": 80}, "good": {"max": 0.5, "points": 50}}
    # - categorical: {"Employed": 60, "Self-Employed": 50}
    # - optimal:     {"optimal": 35, "tolerance": 20}
    thresholds: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)

    min_value: Mapped[Optional[Decimal]] = mapped_column(Numeric(15, 4), nullable=True)
    max_value: Mapped[Optional[Decimal]] = mapped_column(Numeric(15, 4), nullable=True)
    optimal_value: Mapped[Optional[Decimal]] = mapped_column(Numeric(15, 4), nullable=True)

    # Active Status
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    def __repr__(self) -> str:
        return (
            f"<ScoringConfig(id={self.id}, factor={self.factor!r}, "
            f"type={self.calculation_type}, active={self.is_active})>"
        )


class ScoreRange(BaseModel):
    """Named score interval mapped to a business outcome."""

    __tablename__ = "score_ranges"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Interval: max_score NULL means unbounded above
    min_score: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    max_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    color: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)  # e.g., "#10B981"

    # Business Outcome
    approval_status: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    risk_level: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    interest_rate_adjustment: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=Decimal("0.00")
    )  # Percentage points, e.g., -0.5
    loan_limit_adjustment: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=Decimal("1.00")
    )  # Multiplier, e.g., 1.2

    # Lowest priority wins when ranges overlap
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    def __repr__(self) -> str:
        return (
            f"<ScoreRange(id={self.id}, name={self.name!r}, "
            f"min={self.min_score}, max={self.max_score}, priority={self.priority})>"
        )
