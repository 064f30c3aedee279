"""
Unit tests for condition evaluation and the rule engine.
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from credit_engine.core.enums import Operator
from credit_engine.services.engine import (
    Condition,
    RuleDefinition,
    RuleEngine,
    evaluate_condition,
)

_CREATED = datetime(2026, 1, 1, tzinfo=timezone.utc)


def rule(name, condition, action, action_value=None, priority=5, created_offset=0):
    """Build a rule definition the way the snapshot loader does."""
    return RuleDefinition.from_model(
        SimpleNamespace(
            id=uuid.uuid4(),
            name=name,
            priority=priority,
            type="risk",
            category="general",
            weight=Decimal("1"),
            created_at=_CREATED + timedelta(seconds=created_offset),
            condition=condition,
            action=action,
            action_value=action_value,
        )
    )


def cond(field, operator, value):
    return Condition(field=field, operator=Operator(operator), value=value)


class TestEvaluateCondition:
    """Test cases for evaluate_condition."""

    @pytest.mark.parametrize(
        "operator,value,expected",
        [
            (">", 700, True),
            (">", 720, False),
            (">=", 720, True),
            ("<", 800, True),
            ("<=", 719, False),
            ("==", 720, True),
            ("!=", 720, False),
        ],
    )
    def test_numeric_comparisons(self, operator, value, expected):
        assert evaluate_condition(cond("creditScore", operator, value), {"creditScore": 720}) is expected

    def test_integer_and_float_compare_numerically(self):
        assert evaluate_condition(cond("ratio", "==", 1), {"ratio": 1.0})

    def test_missing_field_never_matches(self):
        record = {"age": 30}

        assert not evaluate_condition(cond("creditScore", ">", 0), record)
        assert not evaluate_condition(cond("creditScore", "!=", 700), record)

    def test_ordering_needs_comparable_types(self):
        record = {"employmentStatus": "Employed"}

        assert not evaluate_condition(cond("employmentStatus", ">", 5), record)

    def test_string_number_is_not_coerced(self):
        assert not evaluate_condition(cond("creditScore", ">", 700), {"creditScore": "720"})

    def test_dates_compare_chronologically(self):
        record = {"employedSince": "2020-06-01"}

        assert evaluate_condition(cond("employedSince", "<", "2021-01-01"), record)
        assert not evaluate_condition(cond("employedSince", ">", "2021-01-01"), record)

    def test_textual_operators(self):
        record = {"email": "jane@example.com"}

        assert evaluate_condition(cond("email", "includes", "@example"), record)
        assert evaluate_condition(cond("email", "startsWith", "jane"), record)
        assert evaluate_condition(cond("email", "endsWith", ".com"), record)
        assert not evaluate_condition(cond("email", "endsWith", ".org"), record)

    def test_boolean_equality(self):
        assert evaluate_condition(cond("homeowner", "==", True), {"homeowner": True})
        assert not evaluate_condition(cond("homeowner", "==", 1), {"homeowner": True})


class TestRuleEngine:
    """Test cases for RuleEngine."""

    def test_bureau_score_bonus(self):
        engine = RuleEngine(
            [
                rule(
                    "Strong bureau score",
                    {"field": "creditScore", "operator": ">", "value": 700},
                    "adjust_score",
                    {"adjustment": 5, "reason": "Bureau score above 700"},
                )
            ]
        )

        outcome = engine.execute_rules({"creditScore": 720})

        assert outcome.final_score_adjustment == Decimal("5")
        assert outcome.triggered_count == 1
        assert outcome.results[0].result["reason"] == "Bureau score above 700"

    def test_score_adjustments_are_summed(self):
        engine = RuleEngine(
            [
                rule("Bonus", {"field": "age", "operator": ">=", "value": 18}, "adjust_score", {"adjustment": 10}),
                rule("Malus", {"field": "age", "operator": "<", "value": 30}, "adjust_score", {"adjustment": -3}),
            ]
        )

        outcome = engine.execute_rules({"age": 25})

        assert outcome.final_score_adjustment == Decimal("7")

    def test_zero_adjustment_reported_as_none(self):
        engine = RuleEngine(
            [rule("Never", {"field": "age", "operator": ">", "value": 200}, "adjust_score", {"adjustment": 10})]
        )

        outcome = engine.execute_rules({"age": 25})

        assert outcome.final_score_adjustment is None
        assert outcome.results[0].triggered is False

    def test_rules_run_in_priority_order(self):
        low = rule("Low", {"field": "age", "operator": ">", "value": 0}, "flag", {"flag": "low"}, priority=1)
        high = rule("High", {"field": "age", "operator": ">", "value": 0}, "flag", {"flag": "high"}, priority=9)
        older = rule("Older", {"field": "age", "operator": ">", "value": 0}, "flag", {"flag": "older"}, priority=5)
        newer = rule(
            "Newer", {"field": "age", "operator": ">", "value": 0}, "flag", {"flag": "newer"},
            priority=5, created_offset=60,
        )

        outcome = RuleEngine([low, newer, high, older]).execute_rules({"age": 40})

        assert [r.rule_name for r in outcome.results] == ["High", "Older", "Newer", "Low"]
        assert outcome.flags == ["high", "older", "newer", "low"]

    def test_last_status_override_wins(self):
        approve = rule("Approve", {"field": "income", "operator": ">", "value": 0}, "approve", priority=9)
        reject = rule("Reject", {"field": "income", "operator": ">", "value": 0}, "reject", priority=1)

        outcome = RuleEngine([reject, approve]).execute_rules({"income": 5000})

        assert outcome.final_status_override == "Rejected"

    def test_limit_adjustments_summed_and_capped(self):
        engine = RuleEngine(
            [
                rule("Raise", {"field": "income", "operator": ">", "value": 0}, "adjust_limit",
                     {"adjustment": 5000}, priority=9),
                rule("Raise more", {"field": "income", "operator": ">", "value": 0}, "adjust_limit",
                     {"adjustment": 8000, "max_amount": 10000}, priority=5),
            ]
        )

        outcome = engine.execute_rules({"income": 5000})

        assert outcome.final_limit_adjustment == Decimal("10000")
        assert outcome.results[1].result["capped_at"] == 10000.0

    def test_limit_multipliers_multiply(self):
        engine = RuleEngine(
            [
                rule("Boost", {"field": "income", "operator": ">", "value": 0}, "adjust_limit", {"multiplier": 1.5}),
                rule("Trim", {"field": "income", "operator": ">", "value": 0}, "adjust_limit", {"multiplier": 0.5}),
            ]
        )

        outcome = engine.execute_rules({"income": 5000})

        assert outcome.final_limit_multiplier == Decimal("0.75")

    def test_flag_default_message(self):
        engine = RuleEngine([rule("Check", {"field": "age", "operator": ">", "value": 0}, "flag")])

        outcome = engine.execute_rules({"age": 40})

        assert outcome.flags == ["Review required"]

    def test_unparsable_rule_isolated(self):
        broken = rule("Broken", {"field": "age", "operator": "~=", "value": 1}, "adjust_score",
                      {"adjustment": 5}, priority=9)
        healthy = rule("Healthy", {"field": "age", "operator": ">", "value": 0}, "adjust_score",
                       {"adjustment": 5}, priority=1)

        outcome = RuleEngine([broken, healthy]).execute_rules({"age": 40})

        failed, succeeded = outcome.results
        assert failed.triggered is False
        assert failed.action == "unknown"
        assert failed.error
        assert failed.result["success"] is False
        assert succeeded.triggered is True
        assert outcome.final_score_adjustment == Decimal("5")

    def test_unknown_action_isolated(self):
        engine = RuleEngine([rule("Odd", {"field": "age", "operator": ">", "value": 0}, "escalate")])

        outcome = engine.execute_rules({"age": 40})

        assert outcome.results[0].action == "unknown"
        assert outcome.triggered_count == 0

    def test_result_payload_is_json_friendly(self):
        engine = RuleEngine(
            [rule("Bonus", {"field": "age", "operator": ">", "value": 0}, "adjust_score", {"adjustment": 2.5})]
        )

        payload = engine.execute_rules({"age": 40}).results[0].result

        assert payload["score_adjustment"] == 2.5
        assert isinstance(payload["score_adjustment"], float)
        assert payload["success"] is True
