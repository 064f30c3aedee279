"""Weighted factor-based scoring engine."""

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List

from credit_engine.core.enums import CalculationType
from credit_engine.services.engine.base import FactorCalculator, FactorDefinition, FactorResult
from credit_engine.services.engine.calculators import (
    CategoricalCalculator,
    LinearCalculator,
    OptimalCalculator,
    ThresholdCalculator,
)
from credit_engine.services.engine.values import ApplicantRecord, is_missing

logger = logging.getLogger(__name__)

# Bottom of the score scale; factor points are added on top of it
BASE_SCORE = 300

DEFAULT_CATEGORIES = ("demographic", "financial", "credit", "employment", "general")


def round_score(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass
class ScoreCalculation:
    """
    Output of one scoring pass.

    Attributes:
        total_score: base_score + rounded sum of weighted factor points (unclamped)
        base_score: Anchor of the score scale
        max_score: base_score + rounded sum of max_points x weight over active factors
        results: Per-factor results, in factor order
        breakdown: Weighted subtotal per category
    """

    total_score: int
    base_score: int
    max_score: int
    results: List[FactorResult] = field(default_factory=list)
    breakdown: Dict[str, Decimal] = field(default_factory=dict)


class ScoringEngine:
    """
    Scoring engine computing weighted factor points.

    This class:
    - Maintains a registry of factor calculators keyed by calculation type
    - Scores every active factor present in the applicant record
    - Aggregates weighted points and category subtotals

    The engine holds no per-applicant state: the result depends only on
    the record and the factor definitions it was built with.
    """

    def __init__(self, factors: Iterable[FactorDefinition]):
        """
        Initialize the scoring engine.

        Args:
            factors: Active factor definitions from the configuration snapshot
        """
        self.factors = tuple(factors)
        self._calculators: Dict[CalculationType, FactorCalculator] = {}
        self._register_default_calculators()

    def _register_default_calculators(self) -> None:
        for calculator in (
            LinearCalculator(),
            ThresholdCalculator(),
            CategoricalCalculator(),
            OptimalCalculator(),
        ):
            self._calculators[calculator.calculation_type] = calculator

    def get_calculator(self, calculation_type: CalculationType) -> FactorCalculator:
        """
        Look up the calculator for a calculation type.

        Raises:
            ValueError: If no calculator is registered for the type
        """
        calculator = self._calculators.get(calculation_type)
        if calculator is None:
            raise ValueError(f"No calculator registered for calculation type: {calculation_type}")
        return calculator

    def calculate_score(self, record: ApplicantRecord) -> ScoreCalculation:
        """
        Score an applicant record against all active factors.

        Args:
            record: Applicant record

        Returns:
            ScoreCalculation with totals, per-factor results and category breakdown
        """
        results: List[FactorResult] = []
        breakdown: Dict[str, Decimal] = {category: Decimal("0") for category in DEFAULT_CATEGORIES}
        total_weighted = Decimal("0")
        total_max_weighted = Decimal("0")

        for definition in self.factors:
            result = self.calculate_factor(definition, record)
            results.append(result)

            breakdown[definition.category] = (
                breakdown.get(definition.category, Decimal("0")) + result.weighted_score
            )
            total_weighted += result.weighted_score
            total_max_weighted += definition.max_weighted_points

        return ScoreCalculation(
            total_score=BASE_SCORE + round_score(total_weighted),
            base_score=BASE_SCORE,
            max_score=BASE_SCORE + round_score(total_max_weighted),
            results=results,
            breakdown=breakdown,
        )

    def calculate_factor(
        self, definition: FactorDefinition, record: ApplicantRecord
    ) -> FactorResult:
        """
        Score a single factor.

        Missing values and calculation failures contribute 0 points and are
        reported in the result details rather than raised.
        """
        value = record.get(definition.factor)
        details: dict = {
            "calculation_type": definition.calculation_type.value,
            "raw_value": value,
        }
        points = Decimal("0")

        if is_missing(record, definition.factor):
            details["skipped"] = "value missing"
        else:
            try:
                calculator = self.get_calculator(definition.calculation_type)
                points = calculator.calculate(definition, value)
            except (ValueError, ArithmeticError) as e:
                logger.warning(f"Scoring factor '{definition.factor}' failed: {str(e)}")
                details["skipped"] = "calculation failed"
                details["error"] = str(e)
                points = Decimal("0")

        return FactorResult(
            factor=definition.factor,
            name=definition.name,
            category=definition.category,
            points=points,
            max_points=definition.max_points,
            weight=definition.weight,
            weighted_score=points * definition.weight,
            details=details,
        )

    def validate_factor(self, definition: FactorDefinition) -> None:
        """
        Validate a factor definition with its calculator.

        Raises:
            ValueError: If the thresholds are unusable
        """
        self.get_calculator(definition.calculation_type).validate(definition)

    def missing_factors(self, record: ApplicantRecord) -> List[str]:
        """Active factor keys absent (or null) in the record."""
        return [d.factor for d in self.factors if is_missing(record, d.factor)]

    def summary(self) -> dict:
        """Factor counts and total max points per category."""
        categories: Dict[str, int] = {}
        for definition in self.factors:
            categories[definition.category] = categories.get(definition.category, 0) + 1

        return {
            "active_factors": len(self.factors),
            "total_max_points": sum((d.max_points for d in self.factors), Decimal("0")),
            "total_max_weighted_points": sum(
                (d.max_weighted_points for d in self.factors), Decimal("0")
            ),
            "categories": categories,
        }
