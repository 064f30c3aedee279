"""Core enums for type safety across the application."""

from enum import Enum


class CalculationType(str, Enum):
    """How a scoring factor turns a raw value into points."""

    LINEAR = "linear"
    THRESHOLD = "threshold"
    CATEGORICAL = "categorical"
    OPTIMAL = "optimal"


class RuleType(str, Enum):
    """Business rule families."""

    ELIGIBILITY = "eligibility"
    RISK = "risk"
    PRICING = "pricing"
    LIMIT = "limit"


class RuleAction(str, Enum):
    """Action executed when a rule's condition is met."""

    APPROVE = "approve"
    REJECT = "reject"
    FLAG = "flag"
    ADJUST_SCORE = "adjust_score"
    ADJUST_LIMIT = "adjust_limit"


class Operator(str, Enum):
    """Comparison operators supported in rule conditions."""

    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    EQ = "=="
    NEQ = "!="
    INCLUDES = "includes"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"

    @property
    def is_ordering(self) -> bool:
        return self in (Operator.GT, Operator.LT, Operator.GTE, Operator.LTE)

    @property
    def is_textual(self) -> bool:
        return self in (Operator.INCLUDES, Operator.STARTS_WITH, Operator.ENDS_WITH)


class ApprovalStatus(str, Enum):
    """Approval outcomes produced by ranges and rule overrides."""

    APPROVED = "Approved"
    APPROVED_WITH_CONDITIONS = "Approved with Conditions"
    MANUAL_REVIEW = "Manual Review"
    REJECTED = "Rejected"


class RiskLevel(str, Enum):
    """Risk tiers attached to a decision."""

    LOW = "Low Risk"
    MEDIUM = "Medium Risk"
    HIGH = "High Risk"
    VERY_HIGH = "Very High Risk"
    UNKNOWN = "Unknown"


class FieldType(str, Enum):
    """Input types of configurable applicant fields."""

    TEXT = "text"
    NUMBER = "number"
    SELECT = "select"
    CHECKBOX = "checkbox"
    DATE = "date"
    RADIO = "radio"

    @property
    def has_options(self) -> bool:
        return self in (FieldType.SELECT, FieldType.RADIO)


class FieldCategory(str, Enum):
    """Groups applicant fields are presented in."""

    PERSONAL = "personal"
    FINANCIAL = "financial"
    EMPLOYMENT = "employment"
    CREDIT = "credit"
