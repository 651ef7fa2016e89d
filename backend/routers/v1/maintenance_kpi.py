"""
Maintenance KPI API Routes

Bonus accrual for equipment maintenance tasks. Task completion stores
the returned outcome on the task; verification rejects replace it with
the reset outcome; monthly payroll applies the efficiency rating.
"""

import logging

from fastapi import APIRouter

from backend.schemas.maintenance_kpi import (
    MonthCompletionRequest,
    MonthlyRatingRequest,
    TaskBonusRequest,
    TaskRejectionRequest,
    TaskRejectionResponse,
)
from engines.schemas.maintenance_kpi import (
    MonthCompletionBonus,
    MonthlyRatingResult,
    TaskKPIOutcome,
)
from engines.services.kpi_accrual import (
    calculate_month_completion_bonus,
    calculate_monthly_rating,
    calculate_task_bonus,
    reset_task_outcome,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/task-bonus",
    response_model=TaskKPIOutcome,
    summary="Accrue task bonus",
    description="Calculate KPI points, multiplier and bonus for a completed task.",
)
async def accrue_task_bonus(request: TaskBonusRequest) -> TaskKPIOutcome:
    """Calculate the KPI outcome stored on a task at completion time."""
    outcome = calculate_task_bonus(request.task, request.config)

    for note in outcome.calculation_notes:
        logger.warning(f"Maintenance KPI note: {note}")

    return outcome


@router.post(
    "/task-reset",
    response_model=TaskRejectionResponse,
    summary="Reset rejected task",
    description="Outcome and state for a task whose completion was rejected.",
)
async def reset_rejected_task(request: TaskRejectionRequest) -> TaskRejectionResponse:
    """Zero the stored KPI outcome of a rejected completion."""
    logger.info(f"Maintenance completion rejected: {request.reason}")

    return TaskRejectionResponse(
        rejection_reason=request.reason,
        outcome=reset_task_outcome(),
    )


@router.post(
    "/monthly-rating",
    response_model=MonthlyRatingResult,
    summary="Monthly efficiency rating",
    description="Apply the efficiency rating multiplier to a month's raw bonuses.",
)
async def monthly_rating(request: MonthlyRatingRequest) -> MonthlyRatingResult:
    """Rate one employee's maintenance month."""
    result = calculate_monthly_rating(request.stats, request.config)

    for note in result.calculation_notes:
        logger.warning(f"Monthly rating note: {note}")

    return result


@router.post(
    "/month-completion-bonus",
    response_model=MonthCompletionBonus,
    summary="Month completion bonus",
    description="Bonus awarded when the last open task of the month is completed.",
)
async def month_completion_bonus(request: MonthCompletionRequest) -> MonthCompletionBonus:
    """Check the month completion bonus."""
    return calculate_month_completion_bonus(request.open_tasks_remaining, request.config)
