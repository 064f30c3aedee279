"""Optimal-value factor calculator."""

from decimal import Decimal
from typing import Optional, Tuple

from credit_engine.core.enums import CalculationType
from credit_engine.services.engine.base import FactorCalculator, FactorDefinition
from credit_engine.services.engine.values import FieldValue, as_number

ZERO = Decimal("0")


class OptimalCalculator(FactorCalculator):
    """
    Full points at an optimal value, decaying linearly to 0 at optimal +/- tolerance.

    The optimum comes from ``optimal_value`` or thresholds ``optimal``; the
    tolerance from thresholds ``tolerance``, then ``max_value``, then twice
    the optimum. Points never go negative.
    """

    calculation_type = CalculationType.OPTIMAL

    def calculate(self, definition: FactorDefinition, value: FieldValue) -> Decimal:
        numeric_value = as_number(value)
        if numeric_value is None:
            raise ValueError(f"Optimal factor '{definition.factor}' requires a number, got {value!r}")

        optimal, tolerance = self._parameters(definition)
        if optimal is None:
            return ZERO

        distance = abs(numeric_value - optimal)
        if distance >= tolerance:
            return ZERO

        return max(ZERO, definition.max_points * (1 - distance / tolerance))

    def validate(self, definition: FactorDefinition) -> None:
        optimal, _ = self._parameters(definition)
        if optimal is None:
            raise ValueError("Optimal factors need an optimal_value or an 'optimal' threshold")

    def _parameters(
        self, definition: FactorDefinition
    ) -> Tuple[Optional[Decimal], Decimal]:
        optimal = definition.optimal_value
        if optimal is None:
            optimal = self._threshold_number(definition.thresholds, "optimal")
        if optimal is None:
            return None, ZERO

        tolerance = self._threshold_number(definition.thresholds, "tolerance")
        if tolerance is None:
            tolerance = definition.max_value
        if tolerance is None or tolerance <= 0:
            tolerance = abs(optimal) * 2
        if tolerance <= 0:
            raise ValueError("Optimal factors need a positive tolerance")
        return optimal, tolerance
