"""Configurable applicant field model."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from credit_engine.db.base import BaseModel, JSONType


class ApplicantField(BaseModel):
    """One input collected from applicants and checked before evaluation."""

    __tablename__ = "applicant_fields"

    # Identification
    field_name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    field_type: Mapped[str] = mapped_column(String(20), nullable=False)  # text, number, select, ...
    category: Mapped[str] = mapped_column(
        String(20), nullable=False, default="personal", index=True
    )

    # Validation
    is_required: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    validation_rules: Mapped[Optional[dict]] = mapped_column(
        JSONType, nullable=True
    )  # e.g., {"min": 18, "max": 100}
    options: Mapped[Optional[list]] = mapped_column(JSONType, nullable=True)  # select / radio choices

    # Presentation
    default_value: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    placeholder: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    help_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    scoring_weight: Mapped[Optional[Decimal]] = mapped_column(Numeric(4, 2), nullable=True)

    # Active Status
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    def __repr__(self) -> str:
        return (
            f"<ApplicantField(id={self.id}, field_name={self.field_name!r}, "
            f"required={self.is_required}, active={self.is_active})>"
        )
