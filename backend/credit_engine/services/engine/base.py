"""Engine foundation: parsed configuration definitions and the calculator base."""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Union
from uuid import UUID

from credit_engine.core.enums import CalculationType, Operator, RuleAction
from credit_engine.services.engine.values import FieldValue


def to_decimal(value: Any, name: str) -> Decimal:
    """
    Convert a configuration number to Decimal.

    Raises:
        ValueError: If the value is not numeric
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"'{name}' must be a number")
    try:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"'{name}' must be a number, got {value!r}")


def optional_decimal(value: Any, name: str) -> Optional[Decimal]:
    return None if value is None else to_decimal(value, name)


def load_json_object(raw: Union[str, Mapping[str, Any], None], name: str) -> dict:
    """
    Accept a JSON object either already decoded or as a JSON string.

    Raises:
        ValueError: If the string is not valid JSON or not an object
    """
    if raw is None or raw == "":
        return {}
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"{name} is not valid JSON: {e.msg}")
    if not isinstance(raw, Mapping):
        raise ValueError(f"{name} must be a JSON object")
    return dict(raw)


def load_thresholds(raw: Union[str, Mapping[str, Any], list, None]) -> dict:
    """Thresholds are a JSON object, or a list of threshold bands stored under "ranges"."""
    if isinstance(raw, str) and raw.strip():
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"thresholds is not valid JSON: {e.msg}")
    if isinstance(raw, list):
        return {"ranges": raw}
    return load_json_object(raw, "thresholds")


# ==================== Scoring Factors ====================


@dataclass(frozen=True)
class FactorDefinition:
    """
    Immutable view of an active scoring factor.

    Attributes:
        factor: Applicant record field the factor reads
        name: Display name
        category: Free-form grouping used for subtotals
        max_points: Maximum points (negative for penalties)
        weight: Multiplier applied to raw points
        calculation_type: Strategy used to compute raw points
        thresholds: Calculation-specific parameters
        min_value/max_value/optimal_value: Optional numeric helpers
    """

    factor: str
    name: str
    max_points: Decimal
    calculation_type: CalculationType
    category: str = "general"
    weight: Decimal = Decimal("1")
    thresholds: Mapping[str, Any] = field(default_factory=dict)
    min_value: Optional[Decimal] = None
    max_value: Optional[Decimal] = None
    optimal_value: Optional[Decimal] = None
    id: Optional[UUID] = None

    @property
    def is_penalty(self) -> bool:
        return self.max_points < 0

    @property
    def max_weighted_points(self) -> Decimal:
        return self.max_points * self.weight

    @classmethod
    def from_model(cls, config: Any) -> "FactorDefinition":
        """Build a definition from a ScoringConfig row (or any object with the same attributes)."""
        return cls(
            id=config.id,
            factor=config.factor,
            name=config.name,
            category=config.category or "general",
            max_points=to_decimal(config.max_points, "max_points"),
            weight=to_decimal(config.weight, "weight"),
            calculation_type=CalculationType(config.calculation_type),
            thresholds=load_thresholds(config.thresholds),
            min_value=optional_decimal(config.min_value, "min_value"),
            max_value=optional_decimal(config.max_value, "max_value"),
            optimal_value=optional_decimal(config.optimal_value, "optimal_value"),
        )


@dataclass
class FactorResult:
    """
    Result of scoring a single factor.

    Attributes:
        factor: Factor key
        name: Display name
        category: Factor category
        points: Raw points before weighting
        max_points: Configured maximum
        weight: Configured weight
        weighted_score: points x weight
        details: Calculation evidence (raw value, thresholds, skip/error reason)
    """

    factor: str
    name: str
    category: str
    points: Decimal
    max_points: Decimal
    weight: Decimal
    weighted_score: Decimal
    details: dict = field(default_factory=dict)

    @property
    def skipped(self) -> bool:
        return bool(self.details.get("skipped"))


class FactorCalculator(ABC):
    """
    Abstract base class for factor calculators using the Strategy pattern.

    Each concrete calculator implements one calculation type. Calculators
    are stateless; ``validate`` is used when a configuration is saved so
    that malformed thresholds are rejected up front, and ``calculate`` is
    called per applicant.
    """

    calculation_type: CalculationType

    @abstractmethod
    def calculate(self, definition: FactorDefinition, value: FieldValue) -> Decimal:
        """
        Compute raw (unweighted) points for a present, non-null value.

        Raises:
            ValueError: If the value or thresholds cannot be used
        """
        pass

    def validate(self, definition: FactorDefinition) -> None:
        """
        Check that the definition carries usable parameters.

        Raises:
            ValueError: If the configuration can never produce points
        """
        pass

    def _threshold_number(
        self,
        thresholds: Mapping[str, Any],
        *keys: str,
        required: bool = False,
    ) -> Optional[Decimal]:
        """Return the first of ``keys`` present in thresholds as a Decimal."""
        for key in keys:
            if thresholds.get(key) is not None:
                return to_decimal(thresholds[key], key)
        if required:
            raise ValueError(f"Threshold field '{keys[0]}' is missing")
        return None


# ==================== Score Ranges ====================


@dataclass(frozen=True)
class RangeDefinition:
    """Immutable view of an active score range."""

    name: str
    min_score: Decimal
    max_score: Optional[Decimal] = None
    description: Optional[str] = None
    color: Optional[str] = None
    approval_status: Optional[str] = None
    risk_level: Optional[str] = None
    interest_rate_adjustment: Decimal = Decimal("0")
    loan_limit_adjustment: Decimal = Decimal("1")
    priority: int = 1
    id: Optional[UUID] = None

    def contains(self, score: Decimal) -> bool:
        if score < self.min_score:
            return False
        return self.max_score is None or score <= self.max_score

    @classmethod
    def from_model(cls, score_range: Any) -> "RangeDefinition":
        return cls(
            id=score_range.id,
            name=score_range.name,
            description=score_range.description,
            min_score=to_decimal(score_range.min_score, "min_score"),
            max_score=optional_decimal(score_range.max_score, "max_score"),
            color=score_range.color,
            approval_status=score_range.approval_status,
            risk_level=score_range.risk_level,
            interest_rate_adjustment=to_decimal(
                score_range.interest_rate_adjustment or 0, "interest_rate_adjustment"
            ),
            loan_limit_adjustment=to_decimal(
                score_range.loan_limit_adjustment
                if score_range.loan_limit_adjustment is not None
                else 1,
                "loan_limit_adjustment",
            ),
            priority=score_range.priority or 1,
        )


# ==================== Rules ====================


@dataclass(frozen=True)
class Condition:
    """Parsed rule condition: ``field <operator> value``."""

    field: str
    operator: Operator
    value: Any

    @classmethod
    def parse(cls, raw: Union[str, Mapping[str, Any], None]) -> "Condition":
        """
        Parse a stored condition.

        Raises:
            ValueError: If the field, operator or value is missing or invalid
        """
        data = load_json_object(raw, "Condition")
        field_name = data.get("field")
        if not isinstance(field_name, str) or not field_name.strip():
            raise ValueError("Condition 'field' must be a non-empty string")
        try:
            operator = Operator(data.get("operator"))
        except ValueError:
            supported = ", ".join(op.value for op in Operator)
            raise ValueError(
                f"Unsupported condition operator {data.get('operator')!r} (supported: {supported})"
            )
        if "value" not in data or data["value"] is None:
            raise ValueError("Condition 'value' is required")
        value = data["value"]
        if isinstance(value, (list, dict)):
            raise ValueError("Condition 'value' must be a scalar")
        return cls(field=field_name.strip(), operator=operator, value=value)

    def to_dict(self) -> dict:
        return {"field": self.field, "operator": self.operator.value, "value": self.value}


@dataclass(frozen=True)
class ActionPayload:
    """Parsed action payload."""

    adjustment: Decimal = Decimal("0")
    reason: Optional[str] = None
    flag: Optional[str] = None
    multiplier: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None

    @classmethod
    def parse(
        cls, action: RuleAction, raw: Union[str, Mapping[str, Any], None]
    ) -> "ActionPayload":
        """
        Parse a stored action payload for ``action``.

        Raises:
            ValueError: If a numeric field is not a number or the payload is unusable
        """
        data = load_json_object(raw, "Action value")
        payload = cls(
            adjustment=to_decimal(data.get("adjustment", 0) or 0, "adjustment"),
            reason=data.get("reason"),
            flag=data.get("flag"),
            multiplier=optional_decimal(data.get("multiplier"), "multiplier"),
            max_amount=optional_decimal(
                data.get("max_amount", data.get("maxAmount")), "max_amount"
            ),
        )
        if action == RuleAction.ADJUST_SCORE and "adjustment" not in data:
            raise ValueError("adjust_score rules require an 'adjustment'")
        if action == RuleAction.ADJUST_LIMIT:
            if "adjustment" not in data and payload.multiplier is None:
                raise ValueError("adjust_limit rules require an 'adjustment' or 'multiplier'")
            if payload.multiplier is not None and payload.multiplier < 0:
                raise ValueError("'multiplier' cannot be negative")
        return payload


@dataclass(frozen=True)
class RuleDefinition:
    """
    Immutable view of an active rule.

    A rule whose condition or action failed to parse keeps ``error`` set;
    the rule engine records it as a failed execution instead of evaluating it.
    """

    name: str
    action: Optional[RuleAction]
    condition: Optional[Condition]
    payload: ActionPayload = field(default_factory=ActionPayload)
    priority: int = 5
    type: Optional[str] = None
    category: Optional[str] = None
    weight: Decimal = Decimal("1")
    created_at: Optional[datetime] = None
    id: Optional[UUID] = None
    error: Optional[str] = None

    @classmethod
    def from_model(cls, rule: Any) -> "RuleDefinition":
        """Build a definition from a Rule row, capturing parse errors on the definition."""
        common = dict(
            id=rule.id,
            name=rule.name,
            priority=rule.priority,
            type=rule.type,
            category=rule.category,
            weight=Decimal(str(rule.weight)) if rule.weight is not None else Decimal("1"),
            created_at=rule.created_at,
        )
        try:
            action = RuleAction(rule.action)
        except ValueError:
            return cls(
                action=None,
                condition=None,
                error=f"Unknown action {rule.action!r}",
                **common,
            )
        try:
            condition = Condition.parse(rule.condition)
            payload = ActionPayload.parse(action, rule.action_value)
        except ValueError as e:
            return cls(action=action, condition=None, error=str(e), **common)
        return cls(action=action, condition=condition, payload=payload, **common)


# ==================== Snapshot ====================


@dataclass(frozen=True)
class RequiredField:
    """Applicant field that every evaluated record must supply."""

    field_name: str
    display_name: str

    @classmethod
    def from_model(cls, applicant_field: Any) -> "RequiredField":
        return cls(
            field_name=applicant_field.field_name,
            display_name=applicant_field.display_name,
        )


@dataclass(frozen=True)
class ConfigurationSnapshot:
    """Active configuration read once at the start of an evaluation."""

    factors: tuple[FactorDefinition, ...] = ()
    ranges: tuple[RangeDefinition, ...] = ()
    rules: tuple[RuleDefinition, ...] = ()
    required_fields: tuple[RequiredField, ...] = ()
