"""
Maintenance KPI Accrual

Pure calculation logic for equipment maintenance bonuses:
- per-task bonus at completion time (points x bonus per point x timeliness)
- monthly efficiency rating applied to the month's accrued bonuses
- one-off bonus for clearing every task of a month
"""

from collections.abc import Mapping
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Any

from engines.schemas.common import HUNDRED, ONE, ZERO
from engines.schemas.maintenance_kpi import (
    EfficiencyThreshold,
    MaintenanceKPIConfig,
    MaintenanceTaskInput,
    MonthCompletionBonus,
    MonthlyRatingResult,
    MonthlyTaskStats,
    TaskKPIOutcome,
)
from engines.services.numeric import to_decimal, to_int

REPAIR_TASK_TYPE = "REPAIR"

# Built-in rating tiers (used when no custom thresholds are configured)
SUPER_BONUS_MULTIPLIER = Decimal("1.2")
REDUCED_MULTIPLIER = Decimal("0.8")
FORFEIT_MULTIPLIER = Decimal("0.0")
STANDARD_MULTIPLIER = Decimal("1.0")
REDUCED_BELOW_PERCENT = Decimal("80")

_NON_NEGATIVE_FIELDS = (
    "points_per_cleaning",
    "points_per_issue_resolved",
    "bonus_per_point",
)
_DECIMAL_FIELDS = (
    "min_efficiency_percent",
    "target_efficiency_percent",
    "on_time_multiplier",
    "late_penalty_multiplier",
)

_ONE_DAY = timedelta(days=1)


def load_kpi_config(raw: MaintenanceKPIConfig | Mapping[str, Any] | None) -> MaintenanceKPIConfig:
    """
    Build a ``MaintenanceKPIConfig`` from a stored configuration row.

    Missing, null and non-numeric values fall back to the model defaults.
    Negative point values and bonus rates are treated as unset.
    """
    if isinstance(raw, MaintenanceKPIConfig):
        return raw
    if not isinstance(raw, Mapping):
        return MaintenanceKPIConfig()

    values: dict[str, Any] = {}

    if isinstance(raw.get("enabled"), bool):
        values["enabled"] = raw["enabled"]

    for field in _NON_NEGATIVE_FIELDS:
        number = to_decimal(raw.get(field))
        if number is not None and number >= 0:
            values[field] = number

    for field in _DECIMAL_FIELDS:
        number = to_decimal(raw.get(field))
        if number is not None:
            values[field] = number

    tolerance = to_int(raw.get("overdue_tolerance_days"))
    if tolerance is not None:
        values["overdue_tolerance_days"] = tolerance

    thresholds = raw.get("efficiency_thresholds")
    if isinstance(thresholds, list):
        parsed: list[EfficiencyThreshold] = []
        for item in thresholds:
            if not isinstance(item, Mapping):
                continue
            from_percent = to_decimal(item.get("from_percent"))
            multiplier = to_decimal(item.get("multiplier"))
            if from_percent is not None and multiplier is not None:
                parsed.append(EfficiencyThreshold(from_percent=from_percent, multiplier=multiplier))
        values["efficiency_thresholds"] = parsed

    return MaintenanceKPIConfig(**values)


def days_overdue(due_date: date | datetime, completed_at: date | datetime) -> int:
    """
    Whole days between due date and completion, rounded up.

    A plain date means midnight of that day. Naive datetimes are read as
    UTC when the other side is timezone-aware. Negative when early.
    """
    due_at = _as_datetime(due_date)
    done_at = _as_datetime(completed_at)

    if (due_at.tzinfo is None) != (done_at.tzinfo is None):
        due_at = _as_aware(due_at)
        done_at = _as_aware(done_at)

    elapsed = done_at - due_at
    # Ceiling division on exact timedelta arithmetic
    return -(-elapsed // _ONE_DAY)


def calculate_task_bonus(
    task: MaintenanceTaskInput,
    config: MaintenanceKPIConfig | Mapping[str, Any] | None,
) -> TaskKPIOutcome:
    """
    Calculate the KPI outcome of a maintenance task at completion time.

    Algorithm:
    1. Disabled KPI: neutral outcome (1 point, multiplier 1.0, no bonus)
    2. Points by task type: repairs earn issue points, everything else
       cleaning points
    3. Base value = points x bonus per point
    4. Days overdue = ceiling of elapsed days since the due date
    5. Late (days overdue > tolerance) -> late penalty multiplier,
       otherwise the on-time multiplier (early counts as on time)
    6. Bonus = base value x multiplier
    """
    config = load_kpi_config(config)

    if not config.enabled:
        return TaskKPIOutcome(
            kpi_points=ONE,
            applied_multiplier=ONE,
            bonus_earned=ZERO,
            calculation_notes=["Maintenance KPI is disabled; no bonus accrued"],
        )

    if task.task_type == REPAIR_TASK_TYPE:
        points = config.points_per_issue_resolved
    else:
        points = config.points_per_cleaning

    base_value = points * config.bonus_per_point

    overdue = days_overdue(task.due_date, task.completed_at)
    is_late = overdue > config.overdue_tolerance_days

    notes: list[str] = []
    if is_late:
        multiplier = config.late_penalty_multiplier
        notes.append(
            f"Completed {overdue} day(s) after due date, beyond the "
            f"{config.overdue_tolerance_days}-day tolerance; late multiplier {multiplier} applied"
        )
    else:
        multiplier = config.on_time_multiplier

    return TaskKPIOutcome(
        kpi_points=points,
        applied_multiplier=multiplier,
        bonus_earned=base_value * multiplier,
        days_overdue=overdue,
        is_late=is_late,
        calculation_notes=notes,
    )


def reset_task_outcome() -> TaskKPIOutcome:
    """
    Outcome stored on a task whose completion was rejected.

    Rejection zeroes the stored outcome instead of recomputing it; the
    task goes back to rework and accrues again on its next completion.
    """
    return TaskKPIOutcome(
        kpi_points=ZERO,
        applied_multiplier=ZERO,
        bonus_earned=ZERO,
        calculation_notes=["Completion rejected; KPI outcome reset"],
    )


def calculate_monthly_rating(
    stats: MonthlyTaskStats,
    config: MaintenanceKPIConfig | Mapping[str, Any] | None,
) -> MonthlyRatingResult:
    """
    Apply the monthly efficiency rating to the month's raw bonuses.

    Efficiency is completed / total tasks; a month without assigned
    tasks counts as 100% so that an empty workload is not penalized.

    Built-in tiers:
    - efficiency >= target: 1.2 (super bonus)
    - efficiency < minimum: 0.0 (month's bonus forfeited)
    - efficiency < 80: 0.8
    - otherwise: 1.0

    Custom ``efficiency_thresholds`` replace the built-in tiers: the
    highest threshold not above the efficiency wins, 1.0 if none does.
    """
    config = load_kpi_config(config)
    notes: list[str] = []

    if stats.total_tasks > 0:
        efficiency = Decimal(stats.completed_tasks) / Decimal(stats.total_tasks) * HUNDRED
    else:
        efficiency = HUNDRED
        notes.append("No tasks assigned this month; efficiency counted as 100%")

    if config.efficiency_thresholds:
        multiplier = _custom_multiplier(efficiency, config.efficiency_thresholds)
        tier = "custom"
    elif efficiency >= config.target_efficiency_percent:
        multiplier, tier = SUPER_BONUS_MULTIPLIER, "super_bonus"
    elif efficiency < config.min_efficiency_percent:
        multiplier, tier = FORFEIT_MULTIPLIER, "forfeited"
        notes.append(
            f"Efficiency below the {config.min_efficiency_percent}% minimum; "
            "monthly maintenance bonus forfeited"
        )
    elif efficiency < REDUCED_BELOW_PERCENT:
        multiplier, tier = REDUCED_MULTIPLIER, "reduced"
    else:
        multiplier, tier = STANDARD_MULTIPLIER, "standard"

    return MonthlyRatingResult(
        efficiency_percent=efficiency,
        rating_multiplier=multiplier,
        projected_bonus=stats.raw_bonus_sum * multiplier,
        rating_tier=tier,
        calculation_notes=notes,
    )


def calculate_month_completion_bonus(
    open_tasks_remaining: int,
    config: MaintenanceKPIConfig | Mapping[str, Any] | None,
) -> MonthCompletionBonus:
    """
    Bonus for finishing every maintenance task due in a month.

    Awarded once, when the last open task of the month is completed:
    bonus per point x cleaning points.
    """
    config = load_kpi_config(config)

    if not config.enabled or open_tasks_remaining > 0:
        return MonthCompletionBonus(awarded=False, bonus_amount=ZERO)

    amount = config.bonus_per_point * config.points_per_cleaning
    return MonthCompletionBonus(awarded=amount > 0, bonus_amount=amount)


def _custom_multiplier(
    efficiency: Decimal,
    thresholds: list[EfficiencyThreshold],
) -> Decimal:
    for threshold in sorted(thresholds, key=lambda item: item.from_percent, reverse=True):
        if efficiency >= threshold.from_percent:
            return threshold.multiplier
    return STANDARD_MULTIPLIER


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
