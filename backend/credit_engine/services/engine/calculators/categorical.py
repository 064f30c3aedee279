"""Categorical factor calculator."""

from decimal import Decimal
from typing import Any, Dict, Mapping

from credit_engine.core.enums import CalculationType
from credit_engine.services.engine.base import FactorCalculator, FactorDefinition, to_decimal
from credit_engine.services.engine.values import FieldValue, as_text


class CategoricalCalculator(FactorCalculator):
    """
    Exact-match lookup of the value's string form.

    Threshold format: {"Employed": 60, "Self-Employed": 50, "Unemployed": 0},
    optionally wrapped as {"categories": {...}}. Unmatched values score 0.
    """

    calculation_type = CalculationType.CATEGORICAL

    def calculate(self, definition: FactorDefinition, value: FieldValue) -> Decimal:
        categories = self.parse_categories(definition.thresholds)
        return categories.get(as_text(value), Decimal("0"))

    def validate(self, definition: FactorDefinition) -> None:
        if not self.parse_categories(definition.thresholds):
            raise ValueError("Categorical factors need at least one category")

    @staticmethod
    def parse_categories(thresholds: Mapping[str, Any]) -> Dict[str, Decimal]:
        raw = thresholds.get("categories", thresholds)
        if not isinstance(raw, Mapping):
            raise ValueError("Categories must be an object of category -> points")
        return {str(key): to_decimal(points, str(key)) for key, points in raw.items()}
