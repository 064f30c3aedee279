"""Business rule and rule execution audit models."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from credit_engine.db.base import BaseModel, JSONType, utcnow


class Rule(BaseModel):
    """Condition/action rule evaluated against applicant records."""

    __tablename__ = "rules"

    # Rule Identification
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False)

    # Condition (JSON): {"field": "creditScore", "operator": ">", "value": 700}
    condition: Mapped[dict] = mapped_column(JSONType, nullable=False)

    # Action & Payload (JSON)
    # Examples:
    # - adjust_score: {"adjustment": 5, "reason": "Strong bureau score"}
    # - adjust_limit: {"adjustment": 5000, "multiplier": 1.1, "max_amount": 20000}
    # - flag:         {"flag": "Manual income verification"}
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    action_value: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)

    # Evaluation order: higher first
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=5, index=True)
    weight: Mapped[Decimal] = mapped_column(
        Numeric(4, 2), nullable=False, default=Decimal("1.00")
    )

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    # Relationships
    executions: Mapped[list["RuleExecution"]] = relationship(
        "RuleExecution",
        back_populates="rule",
    )

    def __repr__(self) -> str:
        return (
            f"<Rule(id={self.id}, name={self.name!r}, action={self.action}, "
            f"priority={self.priority}, active={self.is_active})>"
        )


class RuleExecution(BaseModel):
    """Append-only record of one rule evaluated for one prediction."""

    __tablename__ = "rule_executions"

    # Foreign Keys
    prediction_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("predictions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rule_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("rules.id"),
        nullable=False,
        index=True,
    )

    # Outcome
    triggered: Mapped[bool] = mapped_column(Boolean, nullable=False)
    result: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True, default=dict)
    score_adjustment: Mapped[Optional[Decimal]] = mapped_column(Numeric(8, 2), nullable=True)
    status_override: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    limit_adjustment: Mapped[Optional[Decimal]] = mapped_column(Numeric(15, 2), nullable=True)

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )

    # Relationships
    rule: Mapped["Rule"] = relationship("Rule", back_populates="executions")
    prediction: Mapped["Prediction"] = relationship(
        "Prediction", back_populates="rule_executions"
    )

    def __repr__(self) -> str:
        return (
            f"<RuleExecution(id={self.id}, rule_id={self.rule_id}, "
            f"triggered={self.triggered}, status_override={self.status_override!r})>"
        )
