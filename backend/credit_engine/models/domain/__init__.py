"""Domain models for the application."""

from credit_engine.models.domain.applicant_field import ApplicantField
from credit_engine.models.domain.prediction import Prediction
from credit_engine.models.domain.rule import Rule, RuleExecution
from credit_engine.models.domain.scoring import ScoreRange, ScoringConfig

__all__ = [
    "ApplicantField",
    "ScoringConfig",
    "ScoreRange",
    "Rule",
    "RuleExecution",
    "Prediction",
]
