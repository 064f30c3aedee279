"""Factor calculators for the scoring calculation types."""

from .categorical import CategoricalCalculator
from .linear import LinearCalculator
from .optimal import OptimalCalculator
from .threshold import ThresholdBand, ThresholdCalculator

__all__ = [
    "CategoricalCalculator",
    "LinearCalculator",
    "OptimalCalculator",
    "ThresholdBand",
    "ThresholdCalculator",
]
