"""Prediction service orchestrating decisions and their audit trail."""

import hashlib
import json
import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from credit_engine.config import settings
from credit_engine.core.exceptions import NotFoundError, StoreUnavailable, ValidationError
from credit_engine.models.domain.prediction import Prediction
from credit_engine.models.domain.rule import RuleExecution
from credit_engine.repositories.applicant_field_repository import ApplicantFieldRepository
from credit_engine.repositories.prediction_repository import PredictionRepository
from credit_engine.repositories.rule_repository import RuleRepository
from credit_engine.repositories.scoring_repository import (
    ScoreRangeRepository,
    ScoringConfigRepository,
)
from credit_engine.services.engine import (
    ConfigurationSnapshot,
    Decision,
    DecisionEngine,
    FactorDefinition,
    RangeDefinition,
    RequiredField,
    RuleDefinition,
)
from credit_engine.services.engine.values import ApplicantRecord

logger = logging.getLogger(__name__)

DEFAULT_SESSION = "unknown"


def applicant_hash(record: ApplicantRecord) -> str:
    """First 16 hex chars of the SHA-256 of the canonical JSON record."""
    canonical = json.dumps(record, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


class PredictionService:
    """
    Prediction service for evaluating applicants.

    Each evaluation:
    1. Loads the active configuration once into an immutable snapshot
    2. Runs the decision engine on the snapshot
    3. Persists the prediction and one execution record per evaluated rule

    Persistence is best-effort: a failed audit write is logged and rolled
    back, and the decision is returned without a prediction_id.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the prediction service.

        Args:
            db: Async database session
        """
        self.db = db
        self.repo = PredictionRepository(db)
        self.scoring_repo = ScoringConfigRepository(db)
        self.range_repo = ScoreRangeRepository(db)
        self.rule_repo = RuleRepository(db)
        self.field_repo = ApplicantFieldRepository(db)

    async def load_snapshot(self) -> ConfigurationSnapshot:
        """
        Read the active configuration.

        Returns:
            ConfigurationSnapshot of parsed factors, ranges, rules and required fields

        Raises:
            StoreUnavailable: If the configuration cannot be read
        """
        try:
            configs = await self.scoring_repo.get_active_for_scoring()
            ranges = await self.range_repo.get_active_for_interpretation()
            rules = await self.rule_repo.get_active_rules()
            required_fields = await self.field_repo.get_required()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load configuration snapshot: {str(e)}", exc_info=True)
            raise StoreUnavailable("Configuration store is unavailable")

        factors = []
        for config in configs:
            try:
                factors.append(FactorDefinition.from_model(config))
            except ValueError as e:
                logger.warning(f"Skipping unusable scoring config '{config.factor}': {str(e)}")

        if not ranges:
            logger.warning("No active score ranges; decisions will use the fallback interpretation")

        return ConfigurationSnapshot(
            factors=tuple(factors),
            ranges=tuple(RangeDefinition.from_model(score_range) for score_range in ranges),
            rules=tuple(RuleDefinition.from_model(rule) for rule in rules),
            required_fields=tuple(RequiredField.from_model(rf) for rf in required_fields),
        )

    async def predict(
        self, record: ApplicantRecord, user_session: Optional[str] = None
    ) -> Decision:
        """
        Evaluate an applicant record and record the outcome.

        Args:
            record: Validated applicant record
            user_session: Caller session identifier, if any

        Returns:
            Decision, with prediction_id set when the audit write succeeded

        Raises:
            StoreUnavailable: If the configuration cannot be read
            ValidationError: If an active required applicant field is blank
        """
        snapshot = await self.load_snapshot()

        engine = DecisionEngine(snapshot, model_version=settings.MODEL_VERSION)
        self._check_required_fields(engine, record)
        decision = engine.decide(record)

        decision.prediction_id = await self._record(record, decision, user_session)
        return decision

    @staticmethod
    def _check_required_fields(engine: DecisionEngine, record: ApplicantRecord) -> None:
        missing = engine.missing_required_fields(record)
        if missing:
            raise ValidationError(
                "Applicant record is missing required fields",
                errors=[
                    {
                        "loc": ["body", required.field_name],
                        "msg": f"{required.display_name} is required",
                        "type": "missing",
                    }
                    for required in missing
                ],
            )

    async def _record(
        self,
        record: ApplicantRecord,
        decision: Decision,
        user_session: Optional[str],
    ) -> Optional[UUID]:
        """Persist the prediction and its rule executions; None on failure."""
        prediction = Prediction(
            applicant_hash=applicant_hash(record),
            credit_score=decision.score,
            approval_status=decision.approval_status,
            risk_level=decision.risk_level,
            model_version=decision.model_version,
            processing_time_ms=decision.processing_time_ms,
            applicant_data=dict(record),
            user_session=user_session or DEFAULT_SESSION,
        )

        executions = [
            RuleExecution(
                rule_id=result.rule_id,
                triggered=result.triggered,
                result=result.result,
                score_adjustment=result.score_adjustment,
                status_override=result.status_override,
                limit_adjustment=result.limit_adjustment,
            )
            for result in decision.rule_results
            if result.rule_id is not None
        ]

        try:
            prediction = await self.repo.create_with_executions(prediction, executions)
            prediction_id = prediction.id
            await self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to record prediction audit trail: {str(e)}", exc_info=True)
            await self.db.rollback()
            return None

        return prediction_id

    # ===== History =====

    async def list_predictions(
        self, skip: int = 0, limit: int = 20
    ) -> Tuple[List[Prediction], int]:
        """
        Retrieve recent predictions.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            (predictions newest first, total count)
        """
        predictions = await self.repo.get_recent(skip=skip, limit=limit)
        total = await self.repo.count()
        return predictions, total

    async def get_prediction(self, prediction_id: UUID) -> Prediction:
        """
        Retrieve a prediction with its rule executions.

        Raises:
            NotFoundError: If the prediction does not exist
        """
        prediction = await self.repo.get_by_id_with_executions(prediction_id)
        if not prediction:
            raise NotFoundError(f"Prediction with ID {prediction_id} not found")
        return prediction

