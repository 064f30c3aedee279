"""Scoring factor configuration service."""

import logging
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from credit_engine.core.exceptions import NotFoundError
from credit_engine.models.domain.scoring import ScoringConfig
from credit_engine.repositories.scoring_repository import ScoringConfigRepository
from credit_engine.services.defaults import DEFAULT_SCORING_CONFIGS, SCORING_TEMPLATES
from credit_engine.services.engine import FactorDefinition, ScoringEngine
from credit_engine.services.engine.scoring import BASE_SCORE, round_score

logger = logging.getLogger(__name__)

CONFIG_FIELDS = (
    "factor",
    "name",
    "description",
    "category",
    "max_points",
    "weight",
    "calculation_type",
    "thresholds",
    "min_value",
    "max_value",
    "optimal_value",
    "config_type",
    "is_active",
)


class ScoringConfigService:
    """
    Scoring config service for managing scoring factors.

    Validates every factor with its calculator before it is stored, so the
    scoring engine never sees thresholds it cannot use.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the scoring config service.

        Args:
            db: Async database session
        """
        self.db = db
        self.repo = ScoringConfigRepository(db)

    # ===== Queries =====

    async def list_configs(self, active_only: bool = False) -> List[ScoringConfig]:
        """
        Retrieve scoring factors.

        Args:
            active_only: If True, return only active factors

        Returns:
            Scoring configs ordered by category and name
        """
        return await self.repo.get_configs(active_only=active_only)

    async def get_config(self, config_id: UUID) -> ScoringConfig:
        """
        Retrieve a scoring factor by ID.

        Raises:
            NotFoundError: If the factor does not exist
        """
        config = await self.repo.get_by_id(config_id)
        if not config:
            raise NotFoundError(f"Scoring config with ID {config_id} not found")
        return config

    async def get_active_definitions(self) -> List[FactorDefinition]:
        """Active factors parsed for the scoring engine."""
        configs = await self.repo.get_active_for_scoring()
        return [FactorDefinition.from_model(config) for config in configs]

    async def summary(self) -> Dict[str, Any]:
        """
        Totals over the active factors.

        Returns:
            Factor count, max points and per-category counts
        """
        engine = ScoringEngine(await self.get_active_definitions())
        summary = engine.summary()
        summary["max_possible_score"] = BASE_SCORE + round_score(
            summary["total_max_weighted_points"]
        )
        return summary

    # ===== CRUD Operations =====

    async def create_config(self, **fields: Any) -> ScoringConfig:
        """
        Create a scoring factor.

        Args:
            **fields: Scoring config fields

        Returns:
            Created scoring config

        Raises:
            ValueError: If the factor key exists or the thresholds are unusable
        """
        existing = await self.repo.get_by_factor(fields["factor"])
        if existing:
            raise ValueError(f"Scoring config for factor '{fields['factor']}' already exists")

        self._validate(fields)

        config = await self.repo.create(**fields)
        await self.db.commit()
        await self.db.refresh(config)

        logger.info(f"Created scoring config '{config.factor}' ({config.calculation_type})")
        return config

    async def update_config(self, config_id: UUID, **fields: Any) -> ScoringConfig:
        """
        Update a scoring factor; the merged result is re-validated.

        Raises:
            NotFoundError: If the factor does not exist
            ValueError: If the new factor key exists or the merged thresholds are unusable
        """
        config = await self.get_config(config_id)

        new_factor = fields.get("factor")
        if new_factor and new_factor != config.factor:
            existing = await self.repo.get_by_factor(new_factor)
            if existing:
                raise ValueError(f"Scoring config for factor '{new_factor}' already exists")

        merged = {name: getattr(config, name) for name in CONFIG_FIELDS}
        merged.update(fields)
        self._validate(merged)

        config = await self.repo.update(config, **fields)
        await self.db.commit()
        await self.db.refresh(config)
        return config

    async def toggle_config(
        self, config_id: UUID, is_active: Optional[bool] = None
    ) -> ScoringConfig:
        """
        Set or flip the active flag of a scoring factor.

        Raises:
            NotFoundError: If the factor does not exist
        """
        config = await self.get_config(config_id)
        config.is_active = (not config.is_active) if is_active is None else is_active
        await self.db.commit()
        await self.db.refresh(config)
        return config

    async def delete_config(self, config_id: UUID) -> None:
        """
        Delete a scoring factor.

        Raises:
            NotFoundError: If the factor does not exist
        """
        deleted = await self.repo.delete(config_id)
        if not deleted:
            raise NotFoundError(f"Scoring config with ID {config_id} not found")
        await self.db.commit()

    # ===== Seeding & Templates =====

    async def seed_defaults(self) -> List[ScoringConfig]:
        """
        Replace all scoring factors with the default set.

        Returns:
            The created default factors
        """
        removed = await self.repo.delete_all()

        configs = []
        for defaults in DEFAULT_SCORING_CONFIGS:
            configs.append(await self.repo.create(**defaults))

        await self.db.commit()
        for config in configs:
            await self.db.refresh(config)

        logger.info(f"Seeded {len(configs)} default scoring configs (removed {removed})")
        return configs

    def list_templates(self) -> List[Dict[str, Any]]:
        """Available scoring templates."""
        return [self._template_summary(key) for key in SCORING_TEMPLATES]

    async def apply_template(
        self, template_id: str
    ) -> Tuple[Dict[str, Any], List[ScoringConfig]]:
        """
        Create or update the factors of a template, matched by factor key.

        Factors outside the template are left untouched.

        Args:
            template_id: Template key (e.g., "conservative")

        Returns:
            Template summary and the affected factors

        Raises:
            ValueError: If the template does not exist
        """
        template = SCORING_TEMPLATES.get(template_id)
        if template is None:
            raise ValueError(f"Invalid template ID: {template_id}")

        configs = []
        for template_config in template["configs"]:
            existing = await self.repo.get_by_factor(template_config["factor"])
            if existing:
                configs.append(await self.repo.update(existing, **template_config))
            else:
                configs.append(await self.repo.create(**template_config))

        await self.db.commit()
        for config in configs:
            await self.db.refresh(config)

        logger.info(f"Applied scoring template '{template_id}' to {len(configs)} factors")
        return self._template_summary(template_id), configs

    @staticmethod
    def _template_summary(template_id: str) -> Dict[str, Any]:
        template = SCORING_TEMPLATES[template_id]
        return {
            "id": template_id,
            "name": template["name"],
            "description": template["description"],
            "config_count": len(template["configs"]),
        }

    # ===== Validation =====

    def _validate(self, fields: Dict[str, Any]) -> None:
        """
        Parse the fields as a factor definition and check them with its calculator.

        Raises:
            ValueError: If the definition is unusable
        """
        candidate = SimpleNamespace(
            id=None,
            **{name: fields.get(name) for name in CONFIG_FIELDS},
        )
        if candidate.weight is None:
            candidate.weight = 1
        if candidate.calculation_type is None:
            candidate.calculation_type = "linear"
        if candidate.thresholds is None:
            candidate.thresholds = {}

        definition = FactorDefinition.from_model(candidate)
        ScoringEngine([]).validate_factor(definition)
