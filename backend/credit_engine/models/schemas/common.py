"""Schemas shared by the configuration endpoints."""

from typing import ClassVar, Optional

from pydantic import BaseModel, model_validator


class ActiveToggle(BaseModel):
    """Body of a PATCH: set ``is_active`` explicitly, or omit it to flip."""

    is_active: Optional[bool] = None


class PartialUpdate(BaseModel):
    """
    Base for PUT bodies where every field is optional.

    Fields listed in ``required_columns`` back NOT NULL columns: they may be
    omitted but not sent as an explicit null.
    """

    required_columns: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        nulls = sorted(
            name
            for name in self.model_fields_set & self.required_columns
            if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self
