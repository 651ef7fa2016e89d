"""
Salary Engine MCP Tool

Shift salary calculation exposed as MCP tools.
"""

import logging

from fastmcp import FastMCP

from engines.services.report_metrics import extract_report_metrics
from engines.services.salary_calculator import calculate_salary

logger = logging.getLogger(__name__)

# Initialize MCP server (will be started from server.py)
mcp = FastMCP(
    "ClubOps Payroll Engines",
    instructions=(
        "Payroll engines for gaming-club back offices. "
        "Salary tools compute shift pay from a compensation scheme "
        "(base pay plus fixed, percent, tiered, progressive, penalty and "
        "checklist rules). Maintenance KPI tools compute per-task "
        "maintenance bonuses and the monthly efficiency rating. "
        "All calculations are pure and return an itemized breakdown."
    ),
)


@mcp.tool()
async def calculate_shift_salary(
    hours_worked: float,
    scheme: dict,
    metrics: dict | None = None,
    report_data: dict | None = None,
    evaluations: list[dict] | None = None,
) -> dict:
    """
    Calculate the salary earned for one closed shift.

    The scheme is the stored compensation scheme document: a base pay
    rule (hourly, fixed, per_shift or percent_revenue) plus ordered
    bonus rules (fixed, percent_revenue, tiered, progressive_percent,
    penalty, checklist). Malformed rules contribute 0 and are listed in
    calculation_notes instead of failing the calculation.

    Args:
        hours_worked: Hours worked in the shift
        scheme: Compensation scheme document (nested "base" or legacy flat fields)
        metrics: Pre-computed metrics (total_revenue, revenue_cash, revenue_card, ...)
        report_data: Raw shift report; metrics are derived from it when given
        evaluations: Checklist evaluations for the shift ({template_id, score_percent})

    Returns:
        Dictionary with total, itemized breakdown and calculation notes

    Example:
        Hourly scheme at 150/h with a 3000 bonus above 50000 revenue:
        - 8 hours x 150 = 1200 base
        - total_revenue 60000 falls in the 50000+ tier = 3000 bonus
        - Total: 4200
    """
    shift_metrics = extract_report_metrics(report_data) if report_data else {}
    shift_metrics.update(metrics or {})

    result = calculate_salary(hours_worked, scheme, shift_metrics, evaluations)

    for note in result.calculation_notes:
        logger.warning(f"Salary calculation note: {note}")

    return result.model_dump(mode="json")


@mcp.tool()
async def extract_shift_metrics(report_data: dict) -> dict:
    """
    Derive salary metrics from a raw shift report.

    Revenue keys are derived from cash_income / card_income (or the
    report's own total_revenue); every other numeric field is kept.

    Args:
        report_data: Shift report as submitted by the employee

    Returns:
        Metric key -> numeric value
    """
    return {key: float(value) for key, value in extract_report_metrics(report_data).items()}
