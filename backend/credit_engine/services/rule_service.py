"""Rule management service."""

import logging
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from credit_engine.core.exceptions import NotFoundError, ReferentialConstraintError
from credit_engine.models.domain.rule import Rule, RuleExecution
from credit_engine.repositories.rule_repository import RuleRepository
from credit_engine.services.engine import (
    RuleDefinition,
    RuleEngine,
    RuleEngineResult,
)
from credit_engine.services.engine.values import ApplicantRecord

logger = logging.getLogger(__name__)

RECENT_EXECUTIONS = 10


class RuleService:
    """
    Rule service for managing condition/action rules.

    Conditions and action payloads are parsed before a rule is stored, so
    every persisted rule is evaluable by the rule engine.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the rule service.

        Args:
            db: Async database session
        """
        self.db = db
        self.repo = RuleRepository(db)

    # ===== Queries =====

    async def list_rules(
        self, rule_type: Optional[str] = None, active: Optional[bool] = None
    ) -> List[Rule]:
        """
        Retrieve rules in evaluation order.

        Args:
            rule_type: Optional rule type filter
            active: Optional active status filter
        """
        return await self.repo.get_rules(rule_type=rule_type, active=active)

    async def get_rule(self, rule_id: UUID) -> Rule:
        """
        Retrieve a rule by ID.

        Raises:
            NotFoundError: If the rule does not exist
        """
        rule = await self.repo.get_by_id(rule_id)
        if not rule:
            raise NotFoundError(f"Rule with ID {rule_id} not found")
        return rule

    async def get_rule_with_executions(
        self, rule_id: UUID
    ) -> Tuple[Rule, List[RuleExecution]]:
        """
        Retrieve a rule with its most recent executions.

        Raises:
            NotFoundError: If the rule does not exist
        """
        rule = await self.get_rule(rule_id)
        executions = await self.repo.get_recent_executions(rule_id, limit=RECENT_EXECUTIONS)
        return rule, executions

    async def get_active_definitions(self) -> List[RuleDefinition]:
        """Active rules parsed for the rule engine."""
        rules = await self.repo.get_active_rules()
        return [RuleDefinition.from_model(rule) for rule in rules]

    async def execute(self, record: ApplicantRecord) -> RuleEngineResult:
        """
        Run the active rules against a record without persisting anything.

        Args:
            record: Applicant record

        Returns:
            RuleEngineResult with per-rule results and aggregates
        """
        engine = RuleEngine(await self.get_active_definitions())
        return engine.execute_rules(record)

    # ===== CRUD Operations =====

    async def create_rule(self, **fields: Any) -> Rule:
        """
        Create a rule.

        Args:
            **fields: Rule fields (condition and action_value as dicts)

        Returns:
            Created rule

        Raises:
            ValueError: If the condition or action payload cannot be parsed
        """
        self._validate(fields.get("condition"), fields["action"], fields.get("action_value"))

        rule = await self.repo.create(**fields)
        await self.db.commit()
        await self.db.refresh(rule)

        logger.info(f"Created rule '{rule.name}' ({rule.action}, priority {rule.priority})")
        return rule

    async def update_rule(self, rule_id: UUID, **fields: Any) -> Rule:
        """
        Update a rule; the merged condition and action are re-validated.

        Raises:
            NotFoundError: If the rule does not exist
            ValueError: If the merged condition or action payload cannot be parsed
        """
        rule = await self.get_rule(rule_id)

        self._validate(
            fields.get("condition", rule.condition),
            fields.get("action", rule.action),
            fields.get("action_value", rule.action_value),
        )

        rule = await self.repo.update(rule, **fields)
        await self.db.commit()
        await self.db.refresh(rule)
        return rule

    async def toggle_rule(self, rule_id: UUID, is_active: Optional[bool] = None) -> Rule:
        """
        Set or flip the active flag of a rule.

        Raises:
            NotFoundError: If the rule does not exist
        """
        rule = await self.get_rule(rule_id)
        rule.is_active = (not rule.is_active) if is_active is None else is_active
        await self.db.commit()
        await self.db.refresh(rule)

        logger.info(f"Rule '{rule.name}' is now {'active' if rule.is_active else 'inactive'}")
        return rule

    async def delete_rule(self, rule_id: UUID, cascade: bool = False) -> Dict[str, int]:
        """
        Delete a rule.

        Execution history references rules, so a rule that has executed can
        only be deleted together with its executions.

        Args:
            rule_id: UUID of the rule
            cascade: Also delete the rule's execution records

        Returns:
            Dict with the number of deleted executions

        Raises:
            NotFoundError: If the rule does not exist
            ReferentialConstraintError: If executions exist and cascade is False
        """
        await self.get_rule(rule_id)

        execution_count = await self.repo.count_executions(rule_id)
        if execution_count and not cascade:
            raise ReferentialConstraintError(
                f"Rule {rule_id} has {execution_count} execution records; "
                "delete with cascade=true to remove them",
                details={"rule_id": str(rule_id), "executions": execution_count},
            )

        deleted_executions = 0
        if execution_count:
            deleted_executions = await self.repo.delete_executions(rule_id)

        await self.repo.delete(rule_id)
        await self.db.commit()

        logger.info(f"Deleted rule {rule_id} and {deleted_executions} execution records")
        return {"deleted_executions": deleted_executions}

    # ===== Validation =====

    @staticmethod
    def _validate(condition: Any, action: Any, action_value: Any) -> None:
        """
        Parse the condition and action payload the way the engine will.

        Raises:
            ValueError: If either cannot be parsed
        """
        definition = RuleDefinition.from_model(
            SimpleNamespace(
                id=None,
                name="",
                priority=5,
                type=None,
                category=None,
                weight=None,
                created_at=None,
                condition=condition,
                action=action,
                action_value=action_value,
            )
        )
        if definition.error is not None:
            raise ValueError(definition.error)
