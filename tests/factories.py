"""
Test Factories

Helper functions for building scheme documents, KPI configurations
and maintenance tasks in tests.
"""

from datetime import datetime, timedelta, timezone

from engines.schemas.maintenance_kpi import MaintenanceTaskInput

DUE_AT = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


def make_scheme(base_type: str = "hourly", bonuses: list | None = None, **base_overrides) -> dict:
    """Create a stored compensation scheme document with a nested base."""
    base = {"type": base_type}
    if base_type == "hourly":
        base["amount"] = 150
    elif base_type in ("fixed", "per_shift"):
        base.update({"amount": 2400, "full_shift_hours": 12})
    elif base_type == "percent_revenue":
        base["percent"] = 5
    base.update(base_overrides)
    return {"base": base, "bonuses": bonuses or []}


def make_tiered_rule(**overrides) -> dict:
    """Tiered revenue bonus: 0 up to 50000, 3000 above."""
    defaults = {
        "name": "Revenue tiers",
        "source": "total",
        "type": "tiered",
        "tiers": [
            {"from": 0, "to": 50000, "bonus": 0},
            {"from": 50000, "to": "∞", "bonus": 3000},
        ],
    }
    defaults.update(overrides)
    return defaults


def make_kpi_config(**overrides) -> dict:
    """Create a stored maintenance KPI configuration row."""
    defaults = {
        "enabled": True,
        "points_per_cleaning": 1,
        "points_per_issue_resolved": 3,
        "bonus_per_point": "50.00",
        "overdue_tolerance_days": 3,
        "min_efficiency_percent": 50,
        "target_efficiency_percent": 90,
        "on_time_multiplier": "1.00",
        "late_penalty_multiplier": "0.50",
    }
    defaults.update(overrides)
    return defaults


def make_task(
    task_type: str = "CLEANING",
    days_after_due: float = 0,
    due_at: datetime = DUE_AT,
) -> MaintenanceTaskInput:
    """Create a task completed ``days_after_due`` days after its due moment."""
    return MaintenanceTaskInput(
        task_type=task_type,
        due_date=due_at,
        completed_at=due_at + timedelta(days=days_after_due),
    )
