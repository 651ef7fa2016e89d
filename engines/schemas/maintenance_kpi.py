"""
Maintenance KPI Schemas

Input/output models for equipment maintenance bonus accrual and the
monthly efficiency rating.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from engines.schemas.common import ONE, ZERO, Amount


class EfficiencyThreshold(BaseModel):
    """Custom rating tier: efficiency at or above ``from_percent`` earns ``multiplier``."""

    model_config = ConfigDict(frozen=True)

    from_percent: Amount
    multiplier: Amount


class MaintenanceKPIConfig(BaseModel):
    """
    Per-club maintenance KPI configuration.

    Field defaults are the single source of truth for unset values;
    ``engines.services.kpi_accrual.load_kpi_config`` applies them when
    loading a stored configuration.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    points_per_cleaning: Amount = Field(default=Decimal("1"), ge=0)
    points_per_issue_resolved: Amount = Field(default=Decimal("3"), ge=0)
    bonus_per_point: Amount = Field(default=ZERO, ge=0)
    overdue_tolerance_days: int = Field(default=3, description="Grace days after due date")
    min_efficiency_percent: Amount = Decimal("50")
    target_efficiency_percent: Amount = Decimal("90")
    on_time_multiplier: Amount = ONE
    late_penalty_multiplier: Amount = Decimal("0.5")
    efficiency_thresholds: list[EfficiencyThreshold] = Field(
        default_factory=list,
        description="Optional custom rating tiers replacing the built-in ones",
    )


class MaintenanceTaskInput(BaseModel):
    """A completed maintenance task as seen by the accrual calculator."""

    task_type: str = Field(
        default="CLEANING",
        description="REPAIR earns issue points, anything else cleaning points",
    )
    due_date: datetime | date = Field(..., description="Date or moment the task was due")
    completed_at: datetime = Field(..., description="Moment the task was completed")


class TaskKPIOutcome(BaseModel):
    """
    KPI outcome stored on a task at completion time.

    Stored values are never recomputed; a rejected completion replaces
    them with ``reset_task_outcome()``.
    """

    kpi_points: Amount
    applied_multiplier: Amount
    bonus_earned: Amount
    days_overdue: int | None = Field(
        default=None,
        description="Whole days past due (ceiling); negative when early",
    )
    is_late: bool = False
    calculation_notes: list[str] = Field(default_factory=list)


class MonthlyTaskStats(BaseModel):
    """Aggregated maintenance statistics for one employee and month."""

    total_tasks: int = Field(default=0, ge=0)
    completed_tasks: int = Field(default=0, ge=0)
    raw_bonus_sum: Amount = ZERO


class MonthlyRatingResult(BaseModel):
    efficiency_percent: Amount
    rating_multiplier: Amount
    projected_bonus: Amount
    rating_tier: Literal["super_bonus", "standard", "reduced", "forfeited", "custom"]
    calculation_notes: list[str] = Field(default_factory=list)


class MonthCompletionBonus(BaseModel):
    """Extra bonus for clearing every maintenance task of a month."""

    awarded: bool
    bonus_amount: Amount
