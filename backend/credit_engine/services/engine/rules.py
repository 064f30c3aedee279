"""Rule engine evaluating condition/action rules against applicant records."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Tuple
from uuid import UUID

from credit_engine.core.enums import ApprovalStatus, Operator, RuleAction
from credit_engine.core.exceptions import EvaluationError
from credit_engine.services.engine.base import Condition, RuleDefinition
from credit_engine.services.engine.values import (
    ApplicantRecord,
    as_date,
    as_number,
    as_text,
    is_missing,
)

logger = logging.getLogger(__name__)

UNKNOWN_ACTION = "unknown"
DEFAULT_FLAG = "Review required"

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class RuleExecutionResult:
    """
    Outcome of evaluating one rule against one applicant.

    Attributes:
        rule_id: Identifier of the rule
        rule_name: Rule name at evaluation time
        triggered: Whether the condition held and the action ran
        action: Action name, or "unknown" when the rule could not be parsed
        result: Serializable action payload (reason, flag, error, ...)
        score_adjustment: Score delta produced by an adjust_score action
        status_override: Status set by an approve/reject action
        limit_adjustment: Limit delta produced by an adjust_limit action
        limit_multiplier: Limit multiplier produced by an adjust_limit action
        flag: Advisory marker produced by a flag action
        error: Evaluation error, if the rule failed
    """

    rule_id: Optional[UUID]
    rule_name: str
    triggered: bool
    action: str
    result: dict = field(default_factory=dict)
    score_adjustment: Optional[Decimal] = None
    status_override: Optional[str] = None
    limit_adjustment: Optional[Decimal] = None
    limit_multiplier: Optional[Decimal] = None
    flag: Optional[str] = None
    error: Optional[str] = None


@dataclass
class RuleEngineResult:
    """
    Aggregated outcome of all active rules.

    Attributes:
        results: One entry per evaluated rule, in evaluation order
        final_score_adjustment: Sum of score deltas (None when zero)
        final_status_override: Last approve/reject status evaluated (None when absent)
        final_limit_adjustment: Sum of limit deltas (None when no limit rule fired)
        final_limit_multiplier: Product of limit multipliers (None when none fired)
        flags: Advisory markers, in evaluation order
    """

    results: List[RuleExecutionResult] = field(default_factory=list)
    final_score_adjustment: Optional[Decimal] = None
    final_status_override: Optional[str] = None
    final_limit_adjustment: Optional[Decimal] = None
    final_limit_multiplier: Optional[Decimal] = None
    flags: List[str] = field(default_factory=list)

    @property
    def triggered_count(self) -> int:
        return sum(1 for result in self.results if result.triggered)


def evaluate_condition(condition: Condition, record: ApplicantRecord) -> bool:
    """
    Evaluate ``record[field] <operator> value``.

    Ordering operators need two numbers (or two dates); anything else is
    false rather than an error. Equality compares numbers numerically,
    dates as dates and everything else by exact value. Textual operators
    compare string forms. A missing field never satisfies a condition.

    Args:
        condition: Parsed condition
        record: Applicant record

    Returns:
        True if the condition holds
    """
    if is_missing(record, condition.field):
        return False

    actual = record[condition.field]
    expected = condition.value
    operator = condition.operator

    if operator.is_textual:
        actual_text = as_text(actual)
        expected_text = as_text(expected)
        if operator == Operator.INCLUDES:
            return expected_text in actual_text
        if operator == Operator.STARTS_WITH:
            return actual_text.startswith(expected_text)
        return actual_text.endswith(expected_text)

    pair = _comparable_pair(actual, expected)

    if operator == Operator.EQ:
        return _equals(actual, expected, pair)
    if operator == Operator.NEQ:
        return not _equals(actual, expected, pair)

    if pair is None:
        return False
    left, right = pair
    if operator == Operator.GT:
        return left > right
    if operator == Operator.LT:
        return left < right
    if operator == Operator.GTE:
        return left >= right
    return left <= right


def _comparable_pair(actual: Any, expected: Any) -> Optional[Tuple[Any, Any]]:
    """Return both operands as numbers or both as dates, else None."""
    left_number, right_number = as_number(actual), as_number(expected)
    if left_number is not None and right_number is not None:
        return left_number, right_number

    if isinstance(actual, (bool, int, float, Decimal)) or isinstance(expected, (bool, int, float, Decimal)):
        return None
    left_date, right_date = as_date(actual), as_date(expected)
    if left_date is not None and right_date is not None:
        return left_date, right_date
    return None


def _equals(actual: Any, expected: Any, pair: Optional[Tuple[Any, Any]]) -> bool:
    if pair is not None:
        return pair[0] == pair[1]
    return type(actual) is type(expected) and actual == expected


class RuleEngine:
    """
    Rule engine evaluating active rules in priority order.

    This class:
    - Orders rules by priority, highest first (ties: oldest first)
    - Evaluates each rule's condition and executes its action when triggered
    - Aggregates score deltas (sum), status overrides (last writer wins)
      and limit adjustments (sum, optionally capped)
    - Isolates failures: an error in one rule is recorded on that rule's
      result and never stops later rules
    """

    def __init__(self, rules: Iterable[RuleDefinition]):
        """
        Initialize the rule engine.

        Args:
            rules: Active rule definitions from the configuration snapshot
        """
        self.rules = self.order_rules(rules)

    @staticmethod
    def order_rules(rules: Iterable[RuleDefinition]) -> List[RuleDefinition]:
        """Sort rules by descending priority; ties by creation time, then id."""
        indexed = list(enumerate(rules))
        indexed.sort(
            key=lambda item: (
                -item[1].priority,
                _as_aware(item[1].created_at),
                str(item[1].id or ""),
                item[0],
            )
        )
        return [rule for _, rule in indexed]

    def execute_rules(self, record: ApplicantRecord) -> RuleEngineResult:
        """
        Evaluate all rules against an applicant record.

        Args:
            record: Applicant record

        Returns:
            RuleEngineResult with per-rule results and aggregates
        """
        outcome = RuleEngineResult()
        total_score_adjustment = Decimal("0")
        total_limit_adjustment: Optional[Decimal] = None
        limit_multiplier: Optional[Decimal] = None

        for rule in self.rules:
            try:
                result = self.evaluate_rule(rule, record)
            except Exception as e:
                logger.warning(f"Rule '{rule.name}' ({rule.id}) failed: {str(e)}")
                result = self._failed_result(rule, str(e))
            outcome.results.append(result)

            if not result.triggered:
                continue

            if result.score_adjustment is not None:
                total_score_adjustment += result.score_adjustment

            if result.status_override is not None:
                outcome.final_status_override = result.status_override

            if result.limit_adjustment is not None:
                total_limit_adjustment = (total_limit_adjustment or Decimal("0")) + result.limit_adjustment
                cap = rule.payload.max_amount
                if cap is not None and total_limit_adjustment > cap:
                    total_limit_adjustment = cap
                    result.result["capped_at"] = float(cap)

            if result.limit_multiplier is not None:
                limit_multiplier = (limit_multiplier or Decimal("1")) * result.limit_multiplier

            if result.flag is not None:
                outcome.flags.append(result.flag)

        outcome.final_score_adjustment = total_score_adjustment if total_score_adjustment != 0 else None
        outcome.final_limit_adjustment = total_limit_adjustment
        outcome.final_limit_multiplier = limit_multiplier
        return outcome

    def evaluate_rule(self, rule: RuleDefinition, record: ApplicantRecord) -> RuleExecutionResult:
        """
        Evaluate one rule.

        Raises:
            EvaluationError: If the rule could not be parsed at load time
        """
        if rule.error is not None or rule.action is None or rule.condition is None:
            raise EvaluationError(rule.error or "Rule is not evaluable")

        triggered = evaluate_condition(rule.condition, record)
        result = RuleExecutionResult(
            rule_id=rule.id,
            rule_name=rule.name,
            triggered=triggered,
            action=rule.action.value,
            result={
                "condition": rule.condition.to_dict(),
                "actual": record.get(rule.condition.field),
            },
        )

        if triggered:
            self._apply_action(rule, result)

        return result

    def _apply_action(self, rule: RuleDefinition, result: RuleExecutionResult) -> None:
        payload = rule.payload
        action = rule.action

        if action == RuleAction.APPROVE:
            result.status_override = ApprovalStatus.APPROVED.value
            result.result["reason"] = payload.reason or "Rule-based approval"
        elif action == RuleAction.REJECT:
            result.status_override = ApprovalStatus.REJECTED.value
            result.result["reason"] = payload.reason or "Rule-based rejection"
        elif action == RuleAction.FLAG:
            result.flag = payload.flag or payload.reason or DEFAULT_FLAG
            result.result["flag"] = result.flag
        elif action == RuleAction.ADJUST_SCORE:
            result.score_adjustment = payload.adjustment
            result.result["score_adjustment"] = float(payload.adjustment)
            result.result["reason"] = payload.reason or "Score adjusted by rule"
        elif action == RuleAction.ADJUST_LIMIT:
            result.limit_adjustment = payload.adjustment
            result.limit_multiplier = payload.multiplier
            result.result["limit_adjustment"] = float(payload.adjustment)
            if payload.multiplier is not None:
                result.result["multiplier"] = float(payload.multiplier)
            if payload.max_amount is not None:
                result.result["max_amount"] = float(payload.max_amount)
            result.result["reason"] = payload.reason or "Limit adjusted by rule"

        result.result["success"] = True

    def _failed_result(self, rule: RuleDefinition, error: str) -> RuleExecutionResult:
        parsed = rule.error is None and rule.action is not None
        return RuleExecutionResult(
            rule_id=rule.id,
            rule_name=rule.name,
            triggered=False,
            action=rule.action.value if parsed else UNKNOWN_ACTION,
            result={"success": False, "error": error},
            error=error,
        )


def _as_aware(value: Optional[datetime]) -> datetime:
    if value is None:
        return _EARLIEST
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
