"""
Maintenance KPI Pydantic Schemas

API request/response models for maintenance KPI endpoints.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from engines.schemas.maintenance_kpi import (
    MaintenanceTaskInput,
    MonthlyTaskStats,
    TaskKPIOutcome,
)


class TaskBonusRequest(BaseModel):
    """Schema for accruing the KPI bonus of a completed task."""

    task: MaintenanceTaskInput
    config: dict[str, Any] = Field(
        default_factory=dict,
        description="Club maintenance KPI configuration",
    )


class TaskRejectionRequest(BaseModel):
    """Schema for rejecting a task completion during verification."""

    reason: str = Field(..., description="Why the completion was rejected")

    @field_validator("reason")
    @classmethod
    def reason_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Rejection reason is required")
        return value


class TaskRejectionResponse(BaseModel):
    """State a rejected task returns to, with its reset KPI outcome."""

    status: Literal["IN_PROGRESS"] = "IN_PROGRESS"
    verification_status: Literal["REJECTED"] = "REJECTED"
    rejection_reason: str
    completed_at: None = None
    outcome: TaskKPIOutcome


class MonthlyRatingRequest(BaseModel):
    """Schema for rating one employee's maintenance month."""

    stats: MonthlyTaskStats
    config: dict[str, Any] = Field(default_factory=dict)


class MonthCompletionRequest(BaseModel):
    """Schema for checking the month completion bonus."""

    open_tasks_remaining: int = Field(..., ge=0)
    config: dict[str, Any] = Field(default_factory=dict)
