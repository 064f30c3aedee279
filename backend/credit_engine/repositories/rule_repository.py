"""Repository for rules and their execution history."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from credit_engine.models.domain.rule import Rule, RuleExecution
from credit_engine.repositories.base import BaseRepository


class RuleRepository(BaseRepository[Rule]):
    """
    Repository for Rule with execution history queries.

    Execution records are append-only; they are only ever removed together
    with the rule they reference.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the rule repository.

        Args:
            db: Async database session
        """
        super().__init__(Rule, db)

    async def get_rules(
        self,
        rule_type: Optional[str] = None,
        active: Optional[bool] = None,
    ) -> List[Rule]:
        """
        Retrieve rules in evaluation order.

        Args:
            rule_type: Optional rule type filter
            active: Optional active status filter

        Returns:
            Rules ordered by priority (highest first), then creation time
        """
        stmt = select(Rule)
        if rule_type is not None:
            stmt = stmt.where(Rule.type == rule_type)
        if active is not None:
            stmt = stmt.where(Rule.is_active == active)
        stmt = stmt.order_by(Rule.priority.desc(), Rule.created_at, Rule.id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_active_rules(self) -> List[Rule]:
        """
        Retrieve active rules in evaluation order.

        Returns:
            Active rules ordered by priority (highest first), then creation time
        """
        return await self.get_rules(active=True)

    async def get_recent_executions(
        self, rule_id: UUID, limit: int = 10
    ) -> List[RuleExecution]:
        """
        Retrieve the most recent executions of a rule.

        Args:
            rule_id: UUID of the rule
            limit: Maximum number of executions to return

        Returns:
            Executions, newest first
        """
        stmt = (
            select(RuleExecution)
            .where(RuleExecution.rule_id == rule_id)
            .order_by(RuleExecution.timestamp.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_executions(self, rule_id: UUID) -> int:
        """
        Count execution records referencing a rule.

        Args:
            rule_id: UUID of the rule

        Returns:
            Number of executions
        """
        stmt = select(func.count(RuleExecution.id)).where(RuleExecution.rule_id == rule_id)
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def delete_executions(self, rule_id: UUID) -> int:
        """
        Delete all execution records referencing a rule.

        Args:
            rule_id: UUID of the rule

        Returns:
            Number of deleted executions
        """
        stmt = delete(RuleExecution).where(RuleExecution.rule_id == rule_id)
        result = await self.db.execute(stmt)
        await self.db.flush()
        return result.rowcount
