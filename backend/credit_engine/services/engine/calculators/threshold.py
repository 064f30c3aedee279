"""Threshold factor calculator."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Mapping, Optional

from credit_engine.core.enums import CalculationType
from credit_engine.services.engine.base import (
    FactorCalculator,
    FactorDefinition,
    optional_decimal,
    to_decimal,
)
from credit_engine.services.engine.values import FieldValue, as_number


@dataclass(frozen=True)
class ThresholdBand:
    """One named band: inclusive optional bounds and a fixed point value."""

    name: str
    points: Decimal
    min: Optional[Decimal] = None
    max: Optional[Decimal] = None

    def contains(self, value: Decimal) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True


class ThresholdCalculator(FactorCalculator):
    """
    Fixed points for the first band containing the value.

    Threshold format, either an object (bands in insertion order):
        {"excellent": {"max": 0.3, "points": 80}, "good": {"max": 0.5, "points": 50}}
    or a list:
        [{"name": "optimal", "min": 25, "max": 55, "points": 50}, ...]
    optionally wrapped as {"ranges": ...}.

    Bands are evaluated in configuration order, not sorted, and the first
    match wins so configurers can shadow wider bands with narrower ones.
    """

    calculation_type = CalculationType.THRESHOLD

    def calculate(self, definition: FactorDefinition, value: FieldValue) -> Decimal:
        numeric_value = as_number(value)
        if numeric_value is None:
            raise ValueError(
                f"Threshold factor '{definition.factor}' requires a number, got {value!r}"
            )

        for band in self.parse_bands(definition.thresholds):
            if band.contains(numeric_value):
                return band.points

        return Decimal("0")

    def validate(self, definition: FactorDefinition) -> None:
        if not self.parse_bands(definition.thresholds):
            raise ValueError("Threshold factors need at least one band")

    @staticmethod
    def parse_bands(thresholds: Mapping[str, Any]) -> List[ThresholdBand]:
        """
        Parse threshold bands preserving configuration order.

        Raises:
            ValueError: If a band is not an object or lacks points
        """
        raw = thresholds.get("ranges", thresholds) if isinstance(thresholds, Mapping) else thresholds

        if isinstance(raw, Mapping):
            entries = [(str(name), band) for name, band in raw.items()]
        elif isinstance(raw, list):
            entries = [
                (str(band.get("name", f"band_{index}")) if isinstance(band, Mapping) else str(index), band)
                for index, band in enumerate(raw)
            ]
        else:
            raise ValueError("Threshold bands must be an object or a list")

        bands = []
        for name, raw_band in entries:
            if not isinstance(raw_band, Mapping):
                raise ValueError(f"Threshold band '{name}' must be an object")
            if "points" not in raw_band:
                raise ValueError(f"Threshold band '{name}' is missing 'points'")
            band = ThresholdBand(
                name=name,
                points=to_decimal(raw_band["points"], f"{name}.points"),
                min=optional_decimal(raw_band.get("min"), f"{name}.min"),
                max=optional_decimal(raw_band.get("max"), f"{name}.max"),
            )
            if band.min is not None and band.max is not None and band.min > band.max:
                raise ValueError(f"Threshold band '{name}' has min greater than max")
            bands.append(band)
        return bands
