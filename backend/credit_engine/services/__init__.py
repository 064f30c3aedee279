"""Service layer for business logic."""

from credit_engine.services.prediction_service import PredictionService
from credit_engine.services.rule_service import RuleService
from credit_engine.services.score_range_service import ScoreRangeService
from credit_engine.services.scoring_config_service import ScoringConfigService

__all__ = ["PredictionService", "RuleService", "ScoreRangeService", "ScoringConfigService"]
