from .applicant_field_repository import ApplicantFieldRepository
from .base import BaseRepository
from .prediction_repository import PredictionRepository
from .rule_repository import RuleRepository
from .scoring_repository import ScoreRangeRepository, ScoringConfigRepository

__all__ = [
    "ApplicantFieldRepository",
    "BaseRepository",
    "PredictionRepository",
    "RuleRepository",
    "ScoreRangeRepository",
    "ScoringConfigRepository",
]
