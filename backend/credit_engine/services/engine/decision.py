"""Decision orchestration: scoring, interpretation and rules in a fixed order."""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from credit_engine.core.enums import ApprovalStatus, RiskLevel
from credit_engine.services.engine.base import ConfigurationSnapshot, FactorResult, RequiredField
from credit_engine.services.engine.rules import RuleEngine, RuleExecutionResult
from credit_engine.services.engine.score_range import (
    MAX_SCORE,
    MIN_SCORE,
    ScoreInterpretation,
    ScoreRangeInterpreter,
)
from credit_engine.services.engine.scoring import ScoringEngine, round_score
from credit_engine.services.engine.values import ApplicantRecord, is_blank

logger = logging.getLogger(__name__)

OVERRIDE_RISK_LEVELS = {
    ApprovalStatus.APPROVED.value: RiskLevel.LOW.value,
    ApprovalStatus.REJECTED.value: RiskLevel.HIGH.value,
}

LOW_RISK_RECOMMENDATION = "Proceed with application - score indicates low risk"
ELEVATED_RISK_RECOMMENDATION = "Review recommended - score indicates elevated risk"


def clamp_score(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


@dataclass
class Decision:
    """
    Final decision for one applicant.

    ``base_score`` is the score produced by the factors alone; ``score`` is
    the final value after rule adjustments, always within [300, 850].
    """

    score: int
    approval_status: str
    risk_level: str
    score_interpretation: ScoreInterpretation
    base_score: int
    max_possible_score: int
    scoring_breakdown: List[FactorResult] = field(default_factory=list)
    category_breakdown: Dict[str, Decimal] = field(default_factory=dict)
    rule_results: List[RuleExecutionResult] = field(default_factory=list)
    rules_applied: int = 0
    flags: List[str] = field(default_factory=list)
    missing_factors: List[str] = field(default_factory=list)
    score_adjustment: Optional[Decimal] = None
    status_override: Optional[str] = None
    limit_adjustment: Optional[Decimal] = None
    limit_multiplier: Optional[Decimal] = None
    features: dict = field(default_factory=dict)
    model_version: str = ""
    processing_time_ms: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    prediction_id: Optional[UUID] = None


class DecisionEngine:
    """
    Orchestrates one evaluation over an immutable configuration snapshot.

    Order of operations:
    1. Score the record; the unclamped total is the base score
    2. Interpret the base score for default status and risk
    3. Run the rules against the same record
    4. Apply the rule score delta, clamp to [300, 850], re-interpret
    5. Apply the status override, deriving risk from it

    Without a rule delta only the reported score is clamped; the
    interpretation from step 2 stays on the unclamped base score.
    """

    def __init__(self, snapshot: ConfigurationSnapshot, model_version: str = ""):
        self.snapshot = snapshot
        self.model_version = model_version
        self.scoring_engine = ScoringEngine(snapshot.factors)
        self.interpreter = ScoreRangeInterpreter(snapshot.ranges)
        self.rule_engine = RuleEngine(snapshot.rules)

    def decide(self, record: ApplicantRecord) -> Decision:
        """
        Produce a decision for an applicant record.

        Args:
            record: Applicant record

        Returns:
            Decision (never partially populated)
        """
        started = time.perf_counter()

        calculation = self.scoring_engine.calculate_score(record)
        base_score = calculation.total_score
        interpretation = self.interpreter.interpret(base_score)

        rules_outcome = self.rule_engine.execute_rules(record)

        if rules_outcome.final_score_adjustment is not None:
            score = clamp_score(base_score + round_score(rules_outcome.final_score_adjustment))
            interpretation = self.interpreter.interpret(score)
        else:
            score = clamp_score(base_score)

        approval_status = interpretation.approval_status
        risk_level = interpretation.risk_level

        override = rules_outcome.final_status_override
        if override is not None:
            approval_status = override
            risk_level = OVERRIDE_RISK_LEVELS.get(override, RiskLevel.MEDIUM.value)

        processing_time_ms = int((time.perf_counter() - started) * 1000)

        logger.info(
            f"Decision: score={score} (base {base_score}), status={approval_status}, "
            f"risk={risk_level}, rules triggered={rules_outcome.triggered_count}/"
            f"{len(rules_outcome.results)}"
        )

        return Decision(
            score=score,
            approval_status=approval_status,
            risk_level=risk_level,
            score_interpretation=interpretation,
            base_score=base_score,
            max_possible_score=calculation.max_score,
            scoring_breakdown=calculation.results,
            category_breakdown=calculation.breakdown,
            rule_results=rules_outcome.results,
            rules_applied=len(rules_outcome.results),
            flags=rules_outcome.flags,
            missing_factors=self.scoring_engine.missing_factors(record),
            score_adjustment=rules_outcome.final_score_adjustment,
            status_override=override,
            limit_adjustment=rules_outcome.final_limit_adjustment,
            limit_multiplier=rules_outcome.final_limit_multiplier,
            features=self._features(approval_status, risk_level),
            model_version=self.model_version,
            processing_time_ms=processing_time_ms,
        )

    def missing_required_fields(self, record: ApplicantRecord) -> List[RequiredField]:
        """Required applicant fields the record leaves absent, null or empty."""
        return [
            required
            for required in self.snapshot.required_fields
            if is_blank(record, required.field_name)
        ]

    @staticmethod
    def _features(approval_status: str, risk_level: str) -> dict:
        approved = approval_status == ApprovalStatus.APPROVED.value
        return {
            "riskPrediction": risk_level,
            "recommendation": LOW_RISK_RECOMMENDATION if approved else ELEVATED_RISK_RECOMMENDATION,
        }
