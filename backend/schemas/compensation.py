"""
Compensation Pydantic Schemas

API request models for salary calculation endpoints.

Schemes and metrics are accepted as free-form JSON objects: the salary
engine tolerates malformed rules, so they are not rejected here.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field


class SalaryCalculationRequest(BaseModel):
    """Schema for calculating the salary of one closed shift."""

    hours_worked: Decimal = Field(..., ge=0, description="Hours worked in the shift")
    scheme: dict[str, Any] = Field(
        default_factory=dict,
        description="Compensation scheme version document",
    )
    metrics: dict[str, Any] = Field(
        default_factory=dict,
        description="Period metrics; numeric strings are accepted",
    )
    report_data: dict[str, Any] | None = Field(
        default=None,
        description="Raw shift report; metrics are derived from it when given",
    )
    evaluations: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Checklist evaluations for the shift ({template_id, score_percent})",
    )


class ReportMetricsRequest(BaseModel):
    """Schema for deriving metrics from a shift report."""

    report_data: dict[str, Any] = Field(default_factory=dict)
