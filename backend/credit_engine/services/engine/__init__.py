"""
Credit decision engine.

Pure evaluation over an immutable configuration snapshot: factor scoring,
score range interpretation, rule execution and decision orchestration.
Nothing in this package touches the database.
"""

from .base import (
    ActionPayload,
    Condition,
    ConfigurationSnapshot,
    FactorCalculator,
    FactorDefinition,
    FactorResult,
    RangeDefinition,
    RequiredField,
    RuleDefinition,
)
from .decision import Decision, DecisionEngine, clamp_score
from .rules import RuleEngine, RuleEngineResult, RuleExecutionResult, evaluate_condition
from .score_range import (
    FALLBACK_INTERPRETATION,
    RangeValidation,
    ScoreInterpretation,
    ScoreRangeInterpreter,
    business_impact,
    validate_ranges,
)
from .scoring import BASE_SCORE, ScoreCalculation, ScoringEngine

__all__ = [
    "ActionPayload",
    "BASE_SCORE",
    "Condition",
    "ConfigurationSnapshot",
    "Decision",
    "DecisionEngine",
    "FALLBACK_INTERPRETATION",
    "FactorCalculator",
    "FactorDefinition",
    "FactorResult",
    "RangeDefinition",
    "RangeValidation",
    "RequiredField",
    "RuleDefinition",
    "RuleEngine",
    "RuleEngineResult",
    "RuleExecutionResult",
    "ScoreCalculation",
    "ScoreInterpretation",
    "ScoreRangeInterpreter",
    "ScoringEngine",
    "business_impact",
    "clamp_score",
    "evaluate_condition",
    "validate_ranges",
]
