"""
Unit tests for decision orchestration.
"""

import uuid
from decimal import Decimal
from types import SimpleNamespace

import pytest

from credit_engine.core.enums import CalculationType
from credit_engine.services.defaults import DEFAULT_SCORE_RANGES
from credit_engine.services.engine import (
    ConfigurationSnapshot,
    DecisionEngine,
    FactorDefinition,
    RangeDefinition,
    RequiredField,
    RuleDefinition,
    clamp_score,
)


def default_ranges():
    return tuple(
        RangeDefinition.from_model(SimpleNamespace(id=uuid.uuid4(), **r)) for r in DEFAULT_SCORE_RANGES
    )


def flat_factor():
    """One point per unit of the record's "points" field, up to 600."""
    return FactorDefinition(
        factor="points",
        name="Flat points",
        category="general",
        max_points=Decimal("600"),
        weight=Decimal("1"),
        calculation_type=CalculationType.LINEAR,
        thresholds={"multiplier": 1},
    )


def rule(name, condition, action, action_value=None, priority=5):
    return RuleDefinition.from_model(
        SimpleNamespace(
            id=uuid.uuid4(),
            name=name,
            priority=priority,
            type="risk",
            category="general",
            weight=Decimal("1"),
            created_at=None,
            condition=condition,
            action=action,
            action_value=action_value,
        )
    )


def engine_for(rules=(), ranges=None):
    snapshot = ConfigurationSnapshot(
        factors=(flat_factor(),),
        ranges=default_ranges() if ranges is None else ranges,
        rules=tuple(rules),
    )
    return DecisionEngine(snapshot, model_version="ARC-1.0")


class TestClampScore:
    """Test cases for clamp_score."""

    @pytest.mark.parametrize("score,expected", [(200, 300), (300, 300), (720, 720), (850, 850), (890, 850)])
    def test_clamp(self, score, expected):
        assert clamp_score(score) == expected


class TestDecisionEngine:
    """Test cases for DecisionEngine."""

    def test_range_drives_status_without_rules(self):
        decision = engine_for().decide({"points": 420})

        assert decision.base_score == 720
        assert decision.score == 720
        assert decision.approval_status == "Approved"
        assert decision.risk_level == "Low Risk"
        assert decision.score_interpretation.range.name == "Good"
        assert decision.rules_applied == 0
        assert decision.model_version == "ARC-1.0"

    def test_score_adjustment_is_clamped(self):
        bonus = rule("Bonus", {"field": "points", "operator": ">", "value": 0}, "adjust_score", {"adjustment": 50})

        decision = engine_for([bonus]).decide({"points": 540})

        assert decision.base_score == 840
        assert decision.score == 850
        assert decision.score_adjustment == Decimal("50")

    def test_adjustment_reinterprets_score(self):
        bonus = rule("Bonus", {"field": "points", "operator": ">", "value": 0}, "adjust_score", {"adjustment": 40})

        decision = engine_for([bonus]).decide({"points": 420})

        assert decision.score == 760
        assert decision.score_interpretation.range.name == "Excellent"

    def test_penalty_never_goes_below_floor(self):
        malus = rule("Malus", {"field": "points", "operator": ">=", "value": 0}, "adjust_score", {"adjustment": -100})

        decision = engine_for([malus]).decide({"points": 10})

        assert decision.score == 300
        assert decision.approval_status == "Rejected"

    def test_reject_override_sets_high_risk(self):
        reject = rule("Reject", {"field": "bankrupt", "operator": "==", "value": True}, "reject")

        decision = engine_for([reject]).decide({"points": 500, "bankrupt": True})

        assert decision.score == 800
        assert decision.approval_status == "Rejected"
        assert decision.risk_level == "High Risk"
        assert decision.features["recommendation"].startswith("Review recommended")

    def test_approve_override_sets_low_risk(self):
        approve = rule("Approve", {"field": "vip", "operator": "==", "value": True}, "approve")

        decision = engine_for([approve]).decide({"points": 100, "vip": True})

        assert decision.approval_status == "Approved"
        assert decision.risk_level == "Low Risk"
        assert decision.features == {
            "riskPrediction": "Low Risk",
            "recommendation": "Proceed with application - score indicates low risk",
        }

    def test_no_ranges_falls_back_to_manual_review(self):
        decision = engine_for(ranges=()).decide({"points": 400})

        assert decision.approval_status == "Manual Review"
        assert decision.risk_level == "Unknown"
        assert decision.score_interpretation.range.name == "Unknown"

    def test_flags_and_rule_results_reported(self):
        flag = rule("Young", {"field": "age", "operator": "<", "value": 25}, "flag", {"flag": "Young applicant"})
        skipped = rule("Old", {"field": "age", "operator": ">", "value": 70}, "flag")

        decision = engine_for([flag, skipped]).decide({"points": 400, "age": 21})

        assert decision.flags == ["Young applicant"]
        assert decision.rules_applied == 2
        assert sum(1 for r in decision.rule_results if r.triggered) == 1

    def test_decision_is_deterministic(self):
        engine = engine_for()

        first = engine.decide({"points": 300})
        second = engine.decide({"points": 300})

        assert (first.score, first.approval_status, first.risk_level) == (
            second.score,
            second.approval_status,
            second.risk_level,
        )

    def test_base_above_scale_is_clamped_but_interpreted_unclamped(self):
        decision = engine_for().decide({"points": 570})

        assert decision.base_score == 870
        assert decision.score == 850
        assert decision.score_interpretation.range.name == "Unknown"
        assert decision.approval_status == "Manual Review"

    def test_missing_factors_reported(self):
        decision = engine_for().decide({"age": 40})

        assert decision.missing_factors == ["points"]
        assert decision.score == 300

    def test_no_missing_factors_when_supplied(self):
        assert engine_for().decide({"points": 10}).missing_factors == []

    def test_missing_required_fields(self):
        snapshot = ConfigurationSnapshot(
            factors=(flat_factor(),),
            ranges=default_ranges(),
            rules=(),
            required_fields=(
                RequiredField("age", "Age"),
                RequiredField("region", "Region"),
            ),
        )
        engine = DecisionEngine(snapshot)

        missing = engine.missing_required_fields({"age": 40, "region": " "})

        assert missing == [RequiredField("region", "Region")]
        assert engine.missing_required_fields({"age": 40, "region": "north"}) == []
