"""Pydantic API Schemas for ClubOps Payroll."""

from backend.schemas.compensation import (
    ReportMetricsRequest,
    SalaryCalculationRequest,
)
from backend.schemas.maintenance_kpi import (
    MonthCompletionRequest,
    MonthlyRatingRequest,
    TaskBonusRequest,
    TaskRejectionRequest,
    TaskRejectionResponse,
)

__all__ = [
    "SalaryCalculationRequest",
    "ReportMetricsRequest",
    "TaskBonusRequest",
    "TaskRejectionRequest",
    "TaskRejectionResponse",
    "MonthlyRatingRequest",
    "MonthCompletionRequest",
]
