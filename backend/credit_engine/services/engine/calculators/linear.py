"""Linear factor calculator."""

from decimal import Decimal

from credit_engine.core.enums import CalculationType
from credit_engine.services.engine.base import FactorCalculator, FactorDefinition
from credit_engine.services.engine.values import FieldValue, as_number

ZERO = Decimal("0")


class LinearCalculator(FactorCalculator):
    """
    Points proportional to the value.

    Threshold format:
    - reward:  {"multiplier": 2, "cap": 100000, "scale": 1000}
      points = min(value, cap) / scale * multiplier, clamped to [0, max_points]
    - penalty: {"penalty": -15}
      points = value * penalty, floored at max_points (never clamped to 0)

    ``rate`` is accepted as an alias of ``multiplier``. Without a rate, the
    value is normalised between min_value and max_value onto [0, max_points].
    """

    calculation_type = CalculationType.LINEAR

    def calculate(self, definition: FactorDefinition, value: FieldValue) -> Decimal:
        numeric_value = as_number(value)
        if numeric_value is None:
            raise ValueError(f"Linear factor '{definition.factor}' requires a number, got {value!r}")

        thresholds = definition.thresholds
        penalty = self._threshold_number(thresholds, "penalty")
        rate = self._threshold_number(thresholds, "rate", "multiplier")

        if penalty is not None or (definition.is_penalty and rate is not None):
            return self._penalty_points(definition, numeric_value, penalty if penalty is not None else rate)

        if rate is not None:
            cap = self._threshold_number(thresholds, "cap")
            scale = self._threshold_number(thresholds, "scale") or Decimal("1")
            capped = min(numeric_value, cap) if cap is not None else numeric_value
            points = capped / scale * rate
            return max(ZERO, min(points, definition.max_points))

        if definition.min_value is not None and definition.max_value is not None:
            span = definition.max_value - definition.min_value
            normalized = (numeric_value - definition.min_value) / span
            points = normalized * definition.max_points
            return max(ZERO, min(points, definition.max_points))

        return ZERO

    def _penalty_points(
        self, definition: FactorDefinition, value: Decimal, rate: Decimal
    ) -> Decimal:
        points = value * rate
        if definition.is_penalty:
            return max(points, definition.max_points)
        return points

    def validate(self, definition: FactorDefinition) -> None:
        thresholds = definition.thresholds
        has_rate = self._threshold_number(thresholds, "penalty", "rate", "multiplier") is not None
        has_bounds = definition.min_value is not None and definition.max_value is not None
        if not has_rate and not has_bounds:
            raise ValueError(
                "Linear factors need a 'multiplier'/'rate'/'penalty' threshold "
                "or both min_value and max_value"
            )
        if has_bounds and not has_rate and definition.max_value == definition.min_value:
            raise ValueError("max_value must differ from min_value")
        scale = self._threshold_number(thresholds, "scale")
        if scale is not None and scale == 0:
            raise ValueError("'scale' cannot be zero")
