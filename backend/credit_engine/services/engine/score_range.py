"""Score range interpretation and range-set validation."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Union

from credit_engine.core.enums import ApprovalStatus, RiskLevel
from credit_engine.services.engine.base import RangeDefinition

logger = logging.getLogger(__name__)

MIN_SCORE = 300
MAX_SCORE = 850
DEFAULT_COLOR = "#6B7280"


@dataclass(frozen=True)
class RangeSummary:
    """Identity of the range an interpretation came from."""

    name: str
    min_score: Decimal
    max_score: Optional[Decimal]
    description: Optional[str] = None
    color: str = DEFAULT_COLOR


@dataclass(frozen=True)
class ScoreInterpretation:
    """Business outcome attached to a score."""

    range: RangeSummary
    approval_status: str
    risk_level: str
    interest_rate_adjustment: Decimal
    loan_limit_adjustment: Decimal
    color: str

    @property
    def is_fallback(self) -> bool:
        return self.range.name == FALLBACK_INTERPRETATION.range.name


FALLBACK_INTERPRETATION = ScoreInterpretation(
    range=RangeSummary(
        name="Unknown",
        description="Score does not match any defined range",
        min_score=Decimal("0"),
        max_score=Decimal(MAX_SCORE),
        color=DEFAULT_COLOR,
    ),
    approval_status=ApprovalStatus.MANUAL_REVIEW.value,
    risk_level=RiskLevel.UNKNOWN.value,
    interest_rate_adjustment=Decimal("0"),
    loan_limit_adjustment=Decimal("1.0"),
    color=DEFAULT_COLOR,
)


@dataclass(frozen=True)
class RangeOverlap:
    range1: RangeDefinition
    range2: RangeDefinition


@dataclass(frozen=True)
class RangeGap:
    min: Decimal
    max: Decimal


@dataclass
class RangeValidation:
    """Overlaps and gaps found in a range set."""

    overlaps: List[RangeOverlap] = field(default_factory=list)
    gaps: List[RangeGap] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.overlaps and not self.gaps


class ScoreRangeInterpreter:
    """
    Maps a total score to the active score range.

    Selection: ranges with min_score <= score <= max_score (absent max is
    unbounded). On overlap the lowest ``priority`` wins, then the lowest
    min_score, then configuration order. When nothing matches the fixed
    Unknown / Manual Review interpretation is returned.
    """

    def __init__(self, ranges: Iterable[RangeDefinition]):
        self.ranges = tuple(ranges)

    def find_range(self, score: Union[int, Decimal]) -> Optional[RangeDefinition]:
        """Return the winning range for a score, or None."""
        score = Decimal(str(score))
        matches = [
            (r.priority, r.min_score, index, r)
            for index, r in enumerate(self.ranges)
            if r.contains(score)
        ]
        if not matches:
            return None
        return min(matches, key=lambda match: match[:3])[3]

    def interpret(self, score: Union[int, Decimal]) -> ScoreInterpretation:
        """
        Interpret a score.

        Args:
            score: Total score

        Returns:
            ScoreInterpretation of the matching range, or the fallback
        """
        matching = self.find_range(score)

        if matching is None:
            logger.warning(f"No active score range matches score {score}; using fallback")
            return FALLBACK_INTERPRETATION

        color = matching.color or DEFAULT_COLOR
        return ScoreInterpretation(
            range=RangeSummary(
                name=matching.name,
                description=matching.description,
                min_score=matching.min_score,
                max_score=matching.max_score,
                color=color,
            ),
            approval_status=matching.approval_status or ApprovalStatus.MANUAL_REVIEW.value,
            risk_level=matching.risk_level or RiskLevel.MEDIUM.value,
            interest_rate_adjustment=matching.interest_rate_adjustment,
            loan_limit_adjustment=matching.loan_limit_adjustment,
            color=color,
        )

    def validate(self) -> RangeValidation:
        return validate_ranges(self.ranges)


def validate_ranges(
    ranges: Iterable[RangeDefinition],
    lower_bound: int = MIN_SCORE,
    upper_bound: int = MAX_SCORE,
) -> RangeValidation:
    """
    Report overlaps and gaps in a set of active ranges.

    Scores are whole numbers, so [700, 749] followed by [750, 850] is
    contiguous. Coverage of [lower_bound, upper_bound] is checked at both
    ends as well as between consecutive ranges.

    Args:
        ranges: Active range definitions
        lower_bound: Lowest score the set must cover
        upper_bound: Highest score the set must cover

    Returns:
        RangeValidation listing overlapping pairs and uncovered intervals
    """
    ordered = sorted(ranges, key=lambda r: (r.min_score, r.priority))
    validation = RangeValidation()

    for i, first in enumerate(ordered):
        first_end = first.max_score
        for second in ordered[i + 1:]:
            if first_end is None or second.min_score <= first_end:
                validation.overlaps.append(RangeOverlap(range1=first, range2=second))

    if not ordered:
        validation.gaps.append(RangeGap(min=Decimal(lower_bound), max=Decimal(upper_bound)))
        return validation

    if ordered[0].min_score > lower_bound:
        validation.gaps.append(
            RangeGap(min=Decimal(lower_bound), max=ordered[0].min_score - 1)
        )

    covered_to: Optional[Decimal] = ordered[0].max_score
    for current in ordered[1:]:
        if covered_to is None:
            break
        if current.min_score > covered_to + 1:
            validation.gaps.append(RangeGap(min=covered_to + 1, max=current.min_score - 1))
        if current.max_score is None:
            covered_to = None
        else:
            covered_to = max(covered_to, current.max_score)

    if covered_to is not None and covered_to < upper_bound:
        validation.gaps.append(RangeGap(min=covered_to + 1, max=Decimal(upper_bound)))

    return validation


def business_impact(ranges: Iterable[RangeDefinition]) -> dict:
    """Coverage and outcome distributions for a set of active ranges."""
    ranges = list(ranges)
    approval_distribution: Dict[str, int] = {}
    risk_distribution: Dict[str, int] = {}

    for score_range in ranges:
        status = score_range.approval_status or "Unknown"
        level = score_range.risk_level or "Unknown"
        approval_distribution[status] = approval_distribution.get(status, 0) + 1
        risk_distribution[level] = risk_distribution.get(level, 0) + 1

    coverage = None
    if ranges:
        coverage = {
            "min": min(r.min_score for r in ranges),
            "max": max(r.max_score if r.max_score is not None else Decimal(MAX_SCORE) for r in ranges),
        }

    return {
        "active_ranges": len(ranges),
        "score_coverage": coverage,
        "approval_distribution": approval_distribution,
        "risk_distribution": risk_distribution,
    }
