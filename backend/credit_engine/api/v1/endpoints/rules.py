"""Rule management endpoints."""

import logging
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from credit_engine.core.enums import RuleType
from credit_engine.core.exceptions import CreditEngineError
from credit_engine.core.rate_limit import RateLimiter, enforce_rate_limit
from credit_engine.deps import get_rate_limiter, get_session
from credit_engine.models.schemas.applicant import RuleExecutionRequest
from credit_engine.models.schemas.common import ActiveToggle
from credit_engine.models.schemas.rule import (
    RuleCreate,
    RuleDetailResponse,
    RuleEngineResponse,
    RuleExecutionResponse,
    RuleResponse,
    RuleUpdate,
)
from credit_engine.services.rule_service import RuleService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=list[RuleResponse],
    summary="List rules",
    description="Retrieve rules in evaluation order (highest priority first)",
)
async def list_rules(
    db: Annotated[AsyncSession, Depends(get_session)],
    rule_type: Annotated[
        Optional[RuleType], Query(alias="type", description="Filter by rule type")
    ] = None,
    active: Annotated[
        Optional[bool], Query(description="Filter by active status")
    ] = None,
) -> list[RuleResponse]:
    """List rules, optionally filtered by type and active status."""
    service = RuleService(db)
    rules = await service.list_rules(
        rule_type=rule_type.value if rule_type else None, active=active
    )
    return [RuleResponse.model_validate(rule) for rule in rules]


@router.post(
    "",
    response_model=RuleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a rule",
    description="Create a condition/action rule",
)
async def create_rule(
    rule_data: RuleCreate,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> RuleResponse:
    """
    Create a new rule.

    The condition must name a field, an operator and a comparison value.
    The action payload must match the action:
    - approve / reject: no payload required
    - adjust_score: {"adjustment": n}, optional "reason"
    - adjust_limit: {"adjustment": n} and/or {"multiplier": m}, optional "max_amount"
    - flag: optional {"flag": "..."}
    """
    try:
        service = RuleService(db)
        rule = await service.create_rule(**rule_data.model_dump())
        return RuleResponse.model_validate(rule)

    except HTTPException:
        raise
    except CreditEngineError:
        raise
    except ValueError as e:
        logger.error(f"Validation error creating rule: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error creating rule: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create rule",
        )


@router.post(
    "/execute",
    response_model=RuleEngineResponse,
    summary="Run the rule engine",
    description="Evaluate the active rules against an applicant record without recording anything",
)
async def execute_rules(
    request: Request,
    execution: RuleExecutionRequest,
    db: Annotated[AsyncSession, Depends(get_session)],
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> RuleEngineResponse:
    """Dry-run the active rules for an applicant record."""
    await enforce_rate_limit(request, limiter, scope="rules-execute")

    try:
        service = RuleService(db)
        result = await service.execute(execution.applicant_data)
        return RuleEngineResponse.model_validate(result)

    except HTTPException:
        raise
    except CreditEngineError:
        raise
    except Exception as e:
        logger.error(f"Error executing rules: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to execute rules",
        )


@router.get(
    "/{rule_id}",
    response_model=RuleDetailResponse,
    summary="Get rule details",
    description="Retrieve a rule with its most recent executions",
)
async def get_rule(
    rule_id: UUID,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> RuleDetailResponse:
    """Get a rule by ID with recent execution history."""
    service = RuleService(db)
    rule, executions = await service.get_rule_with_executions(rule_id)

    rule_response = RuleResponse.model_validate(rule)
    return RuleDetailResponse(
        **rule_response.model_dump(),
        recent_executions=[
            RuleExecutionResponse.model_validate(execution) for execution in executions
        ],
    )


@router.put(
    "/{rule_id}",
    response_model=RuleResponse,
    summary="Update a rule",
    description="Update rule fields; the resulting condition and action are re-validated",
)
async def update_rule(
    rule_id: UUID,
    update_data: RuleUpdate,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> RuleResponse:
    """Update a rule's fields."""
    try:
        service = RuleService(db)
        rule = await service.update_rule(
            rule_id, **update_data.model_dump(exclude_unset=True)
        )
        return RuleResponse.model_validate(rule)

    except HTTPException:
        raise
    except CreditEngineError:
        raise
    except ValueError as e:
        logger.error(f"Validation error updating rule {rule_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"Error updating rule {rule_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update rule",
        )


@router.patch(
    "/{rule_id}",
    response_model=RuleResponse,
    summary="Toggle a rule",
    description="Set the active flag, or flip it when no body is sent",
)
async def toggle_rule(
    rule_id: UUID,
    db: Annotated[AsyncSession, Depends(get_session)],
    toggle: Annotated[Optional[ActiveToggle], Body()] = None,
) -> RuleResponse:
    """Activate or deactivate a rule."""
    service = RuleService(db)
    rule = await service.toggle_rule(
        rule_id, is_active=toggle.is_active if toggle else None
    )
    return RuleResponse.model_validate(rule)


@router.delete(
    "/{rule_id}",
    summary="Delete a rule",
    description=(
        "Delete a rule. A rule with execution history is only deleted "
        "when cascade=true, together with its executions"
    ),
)
async def delete_rule(
    rule_id: UUID,
    db: Annotated[AsyncSession, Depends(get_session)],
    cascade: Annotated[
        bool, Query(description="Also delete the rule's execution records")
    ] = False,
) -> dict:
    """Delete a rule, optionally with its execution history."""
    service = RuleService(db)
    result = await service.delete_rule(rule_id, cascade=cascade)
    return {"deleted": True, "rule_id": str(rule_id), **result}
