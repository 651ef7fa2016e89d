"""
Compensation API Routes

Salary calculation for shift closing. The caller loads the employee's
current scheme version and the shift report, and persists the returned
total and breakdown verbatim.
"""

import logging

from fastapi import APIRouter

from backend.schemas.compensation import ReportMetricsRequest, SalaryCalculationRequest
from engines.schemas.compensation import SalaryResult
from engines.services.report_metrics import extract_report_metrics
from engines.services.salary_calculator import calculate_salary

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/salary",
    response_model=SalaryResult,
    summary="Calculate shift salary",
    description="Calculate base pay and every bonus rule for one closed shift.",
)
async def calculate_shift_salary(request: SalaryCalculationRequest) -> SalaryResult:
    """Calculate a shift salary from a scheme document and shift metrics."""
    metrics = extract_report_metrics(request.report_data) if request.report_data else {}
    # Explicit metrics win over values derived from the report
    metrics.update(request.metrics)

    result = calculate_salary(
        request.hours_worked,
        request.scheme,
        metrics,
        request.evaluations,
    )

    for note in result.calculation_notes:
        logger.warning(f"Salary calculation note: {note}")

    return result


@router.post(
    "/metrics",
    response_model=dict[str, float],
    summary="Extract shift metrics",
    description="Derive salary metrics from a raw shift report.",
)
async def extract_shift_metrics(request: ReportMetricsRequest) -> dict[str, float]:
    """Derive revenue and custom numeric metrics from a shift report."""
    metrics = extract_report_metrics(request.report_data)
    return {key: float(value) for key, value in metrics.items()}
