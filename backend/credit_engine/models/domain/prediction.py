"""Prediction audit model."""

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from credit_engine.db.base import BaseModel, JSONType


class Prediction(BaseModel):
    """Audit record of one applicant decision."""

    __tablename__ = "predictions"

    # Privacy-preserving identifier of the evaluated record
    applicant_hash: Mapped[str] = mapped_column(String(16), nullable=False, index=True)

    # Decision Summary
    credit_score: Mapped[int] = mapped_column(Integer, nullable=False)
    approval_status: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    risk_level: Mapped[str] = mapped_column(String(50), nullable=False)
    model_version: Mapped[str] = mapped_column(String(20), nullable=False)
    processing_time_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    applicant_data: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    user_session: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Relationships
    rule_executions: Mapped[list["RuleExecution"]] = relationship(
        "RuleExecution",
        back_populates="prediction",
        cascade="all, delete-orphan",
        order_by="RuleExecution.timestamp",
    )

    def __repr__(self) -> str:
        return (
            f"<Prediction(id={self.id}, score={self.credit_score}, "
            f"status={self.approval_status!r})>"
        )
