"""
Unit tests for the factor calculators and the scoring engine.
"""

from decimal import Decimal

import pytest

from credit_engine.core.enums import CalculationType
from credit_engine.services.defaults import DEFAULT_SCORING_CONFIGS
from credit_engine.services.engine import BASE_SCORE, FactorDefinition, ScoringEngine
from credit_engine.services.engine.calculators import (
    CategoricalCalculator,
    LinearCalculator,
    OptimalCalculator,
    ThresholdCalculator,
)


def factor(**overrides):
    fields = dict(
        factor="annualIncome",
        name="Annual Income",
        category="financial",
        max_points=Decimal("200"),
        weight=Decimal("1"),
        calculation_type=CalculationType.LINEAR,
        thresholds={"multiplier": 2, "cap": 100000, "scale": 1000},
    )
    fields.update(overrides)
    return FactorDefinition(**fields)


def default_factors():
    return [
        FactorDefinition(
            factor=config["factor"],
            name=config["name"],
            category=config["category"],
            max_points=Decimal(str(config["max_points"])),
            weight=Decimal(str(config["weight"])),
            calculation_type=CalculationType(config["calculation_type"]),
            thresholds=config["thresholds"],
        )
        for config in DEFAULT_SCORING_CONFIGS
    ]


class TestLinearCalculator:
    """Test cases for LinearCalculator."""

    @pytest.fixture
    def calculator(self):
        return LinearCalculator()

    def test_income_scaled_and_capped(self, calculator):
        definition = factor()

        assert calculator.calculate(definition, 50000) == Decimal("100")
        # 150,000 is capped at 100,000 -> 200 points
        assert calculator.calculate(definition, 150000) == Decimal("200")

    def test_points_never_exceed_max(self, calculator):
        definition = factor(max_points=Decimal("80"), thresholds={"multiplier": 8, "cap": 20})

        assert calculator.calculate(definition, 15) == Decimal("80")

    def test_penalty_floored_at_max_points(self, calculator):
        definition = factor(
            factor="latePayments12m",
            max_points=Decimal("-15"),
            thresholds={"penalty": -15},
        )

        assert calculator.calculate(definition, 0) == Decimal("0")
        assert calculator.calculate(definition, 3) == Decimal("-15")

    def test_normalized_between_bounds(self, calculator):
        definition = factor(
            max_points=Decimal("100"),
            thresholds={},
            min_value=Decimal("0"),
            max_value=Decimal("200"),
        )

        assert calculator.calculate(definition, 50) == Decimal("25")
        assert calculator.calculate(definition, 500) == Decimal("100")

    def test_non_numeric_value_rejected(self, calculator):
        with pytest.raises(ValueError):
            calculator.calculate(factor(), "a lot")

    def test_validate_requires_rate_or_bounds(self, calculator):
        with pytest.raises(ValueError):
            calculator.validate(factor(thresholds={}))


class TestThresholdCalculator:
    """Test cases for ThresholdCalculator."""

    @pytest.fixture
    def calculator(self):
        return ThresholdCalculator()

    @pytest.fixture
    def age_factor(self):
        return factor(
            factor="age",
            max_points=Decimal("50"),
            calculation_type=CalculationType.THRESHOLD,
            thresholds={
                "optimal": {"min": 25, "max": 55, "points": 50},
                "good": {"min": 22, "max": 65, "points": 40},
                "acceptable": {"min": 18, "max": 70, "points": 25},
            },
        )

    def test_first_matching_band_wins(self, calculator, age_factor):
        assert calculator.calculate(age_factor, 35) == Decimal("50")
        assert calculator.calculate(age_factor, 60) == Decimal("40")
        assert calculator.calculate(age_factor, 19) == Decimal("25")

    def test_bounds_are_inclusive(self, calculator, age_factor):
        assert calculator.calculate(age_factor, 25) == Decimal("50")
        assert calculator.calculate(age_factor, 55) == Decimal("50")

    def test_no_band_scores_zero(self, calculator, age_factor):
        assert calculator.calculate(age_factor, 80) == Decimal("0")

    def test_list_bands(self, calculator):
        definition = factor(
            calculation_type=CalculationType.THRESHOLD,
            thresholds={"ranges": [{"name": "low", "max": 0.3, "points": 80}, {"max": 1, "points": 10}]},
        )

        assert calculator.calculate(definition, 0.2) == Decimal("80")
        assert calculator.calculate(definition, 0.9) == Decimal("10")

    def test_band_without_points_rejected(self, calculator):
        definition = factor(
            calculation_type=CalculationType.THRESHOLD,
            thresholds={"excellent": {"max": 0.3}},
        )

        with pytest.raises(ValueError):
            calculator.validate(definition)


class TestCategoricalCalculator:
    """Test cases for CategoricalCalculator."""

    def test_exact_match_lookup(self):
        definition = factor(
            factor="employmentStatus",
            calculation_type=CalculationType.CATEGORICAL,
            thresholds={"Employed": 60, "Self-Employed": 50},
        )
        calculator = CategoricalCalculator()

        assert calculator.calculate(definition, "Employed") == Decimal("60")
        assert calculator.calculate(definition, "employed") == Decimal("0")
        assert calculator.calculate(definition, "Contractor") == Decimal("0")


class TestOptimalCalculator:
    """Test cases for OptimalCalculator."""

    def test_full_points_at_optimum_and_linear_decay(self):
        definition = factor(
            factor="age",
            max_points=Decimal("40"),
            calculation_type=CalculationType.OPTIMAL,
            thresholds={"tolerance": 20},
            optimal_value=Decimal("35"),
        )
        calculator = OptimalCalculator()

        assert calculator.calculate(definition, 35) == Decimal("40")
        assert calculator.calculate(definition, 45) == Decimal("20")
        assert calculator.calculate(definition, 60) == Decimal("0")


class TestScoringEngine:
    """Test cases for ScoringEngine."""

    def test_default_factors_score_strong_applicant(self, strong_applicant):
        engine = ScoringEngine(default_factors())

        calculation = engine.calculate_score(strong_applicant)

        assert calculation.base_score == BASE_SCORE
        assert calculation.total_score == 784
        # 300 + (50 + 200 + 80 + 80 + 60 + 60 + 40 - 15 - 10)
        assert calculation.max_score == 845
        assert calculation.breakdown["financial"] == Decimal("230")
        assert calculation.breakdown["credit"] == Decimal("114")

    def test_missing_fields_contribute_nothing(self):
        engine = ScoringEngine(default_factors())

        calculation = engine.calculate_score({"annualIncome": 50000})

        assert calculation.total_score == BASE_SCORE + 100
        skipped = [r.factor for r in calculation.results if r.skipped]
        assert "age" in skipped
        assert "annualIncome" not in skipped

    def test_weight_multiplies_points(self):
        engine = ScoringEngine([factor(weight=Decimal("1.5"))])

        calculation = engine.calculate_score({"annualIncome": 40000})

        assert calculation.results[0].points == Decimal("80")
        assert calculation.results[0].weighted_score == Decimal("120.0")
        assert calculation.total_score == BASE_SCORE + 120

    def test_calculation_failure_is_isolated(self):
        engine = ScoringEngine(default_factors())

        calculation = engine.calculate_score({"annualIncome": "unknown", "age": 35})

        income = next(r for r in calculation.results if r.factor == "annualIncome")
        assert income.points == Decimal("0")
        assert income.details["skipped"] == "calculation failed"
        assert calculation.total_score == BASE_SCORE + 50

    def test_same_input_same_output(self, strong_applicant):
        engine = ScoringEngine(default_factors())

        first = engine.calculate_score(strong_applicant)
        second = engine.calculate_score(dict(strong_applicant))

        assert first.total_score == second.total_score
        assert first.breakdown == second.breakdown

    def test_summary(self):
        summary = ScoringEngine(default_factors()).summary()

        assert summary["active_factors"] == 9
        assert summary["total_max_weighted_points"] == Decimal("545")
        assert summary["categories"]["credit"] == 4

    def test_missing_factors_lists_absent_and_null_fields(self, strong_applicant):
        engine = ScoringEngine(default_factors())
        del strong_applicant["educationLevel"]
        strong_applicant["recentInquiries"] = None

        assert engine.missing_factors(strong_applicant) == ["educationLevel", "recentInquiries"]

    def test_complete_record_has_no_missing_factors(self, strong_applicant):
        assert ScoringEngine(default_factors()).missing_factors(strong_applicant) == []
