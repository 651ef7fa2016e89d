"""
Maintenance KPI MCP Tool

Equipment maintenance bonus accrual exposed as MCP tools.
"""

import logging
from decimal import Decimal

from engines.schemas.maintenance_kpi import MaintenanceTaskInput, MonthlyTaskStats
from engines.services.kpi_accrual import (
    calculate_month_completion_bonus as month_completion_bonus,
    calculate_monthly_rating,
    calculate_task_bonus,
)

# Use the same MCP instance as salary_engine
from engines.tools.salary_engine import mcp

logger = logging.getLogger(__name__)


@mcp.tool()
async def calculate_maintenance_task_bonus(
    task_type: str,
    due_date: str,
    completed_at: str,
    config: dict | None = None,
) -> dict:
    """
    Calculate the KPI bonus for a completed maintenance task.

    Repairs earn points_per_issue_resolved, cleanings points_per_cleaning.
    Each point is worth bonus_per_point; tasks finished more than
    overdue_tolerance_days after the due date get the late penalty
    multiplier, all others the on-time multiplier.

    Args:
        task_type: CLEANING or REPAIR
        due_date: Due date or datetime (ISO 8601)
        completed_at: Completion datetime (ISO 8601)
        config: Club maintenance KPI configuration

    Returns:
        Dictionary with kpi_points, applied_multiplier and bonus_earned

    Example:
        Cleaning worth 1 point at 50 per point, 5 days late with 3 days
        tolerance and a 0.5 late multiplier:
        - 1 x 50 x 0.5 = 25 bonus
    """
    task = MaintenanceTaskInput(
        task_type=task_type,
        due_date=due_date,
        completed_at=completed_at,
    )

    outcome = calculate_task_bonus(task, config)

    for note in outcome.calculation_notes:
        logger.warning(f"Maintenance KPI note: {note}")

    return outcome.model_dump(mode="json")


@mcp.tool()
async def calculate_monthly_equipment_rating(
    total_tasks: int,
    completed_tasks: int,
    raw_bonus_sum: float,
    config: dict | None = None,
) -> dict:
    """
    Apply the monthly efficiency rating to accrued maintenance bonuses.

    Args:
        total_tasks: Tasks due this month for the employee
        completed_tasks: Tasks of those completed
        raw_bonus_sum: Sum of bonus_earned over completed tasks
        config: Club maintenance KPI configuration

    Returns:
        Dictionary with efficiency_percent, rating_multiplier and projected_bonus
    """
    stats = MonthlyTaskStats(
        total_tasks=total_tasks,
        completed_tasks=completed_tasks,
        raw_bonus_sum=Decimal(str(raw_bonus_sum)),
    )

    result = calculate_monthly_rating(stats, config)

    for note in result.calculation_notes:
        logger.warning(f"Monthly rating note: {note}")

    return result.model_dump(mode="json")


@mcp.tool()
async def calculate_month_completion_bonus(
    open_tasks_remaining: int,
    config: dict | None = None,
) -> dict:
    """
    Check whether finishing the month's last task earns the completion bonus.

    Args:
        open_tasks_remaining: Tasks due this month that are still open
        config: Club maintenance KPI configuration

    Returns:
        Dictionary with awarded flag and bonus_amount
    """
    return month_completion_bonus(open_tasks_remaining, config).model_dump(mode="json")
