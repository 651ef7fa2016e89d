"""
Maintenance KPI Accrual Unit Tests

Tests for per-task bonus accrual, the monthly efficiency rating and
the month completion bonus.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from engines.schemas.maintenance_kpi import MaintenanceKPIConfig, MonthlyTaskStats
from engines.services.kpi_accrual import (
    calculate_month_completion_bonus,
    calculate_monthly_rating,
    calculate_task_bonus,
    days_overdue,
    load_kpi_config,
    reset_task_outcome,
)
from tests.factories import DUE_AT, make_kpi_config, make_task


class TestLoadConfig:
    """Test configuration defaults."""

    def test_defaults_for_empty_config(self):
        config = load_kpi_config({})

        assert config.enabled is False
        assert config.points_per_cleaning == Decimal("1")
        assert config.points_per_issue_resolved == Decimal("3")
        assert config.bonus_per_point == Decimal("0")
        assert config.overdue_tolerance_days == 3
        assert config.min_efficiency_percent == Decimal("50")
        assert config.target_efficiency_percent == Decimal("90")
        assert config.on_time_multiplier == Decimal("1")
        assert config.late_penalty_multiplier == Decimal("0.5")

    def test_null_and_garbage_values_use_defaults(self):
        config = load_kpi_config(
            {
                "enabled": True,
                "on_time_multiplier": None,
                "late_penalty_multiplier": "half",
                "points_per_cleaning": -2,
                "overdue_tolerance_days": "2",
            }
        )

        assert config.enabled is True
        assert config.on_time_multiplier == Decimal("1")
        assert config.late_penalty_multiplier == Decimal("0.5")
        assert config.points_per_cleaning == Decimal("1")
        assert config.overdue_tolerance_days == 2

    def test_database_numeric_strings(self, kpi_config):
        config = load_kpi_config(kpi_config)

        assert config.bonus_per_point == Decimal("50.00")
        assert config.late_penalty_multiplier == Decimal("0.50")

    def test_none_config(self):
        assert load_kpi_config(None) == MaintenanceKPIConfig()


class TestDaysOverdue:
    """Test elapsed-day ceiling."""

    def test_exact_days(self):
        assert days_overdue(DUE_AT, DUE_AT + timedelta(days=2)) == 2

    def test_partial_day_rounds_up(self):
        assert days_overdue(DUE_AT, DUE_AT + timedelta(days=2, hours=1)) == 3

    def test_early_completion_negative(self):
        assert days_overdue(DUE_AT, DUE_AT - timedelta(days=1, hours=12)) == -1

    def test_same_moment(self):
        assert days_overdue(DUE_AT, DUE_AT) == 0

    def test_midnight_due_date_completed_two_hours_later(self):
        """A date-only due date means midnight; two hours later is day 1."""
        completed = datetime(2025, 3, 10, 2, 0)

        assert days_overdue(date(2025, 3, 10), completed) == 1

    def test_naive_due_date_with_aware_completion(self):
        completed = datetime(2025, 3, 12, 0, 0, tzinfo=timezone.utc)

        assert days_overdue(date(2025, 3, 10), completed) == 2


class TestTaskBonus:
    """Test per-task accrual."""

    def test_on_time_within_tolerance(self, kpi_config):
        """Two days late with three days tolerance keeps the on-time multiplier."""
        outcome = calculate_task_bonus(make_task(days_after_due=2), kpi_config)

        assert outcome.applied_multiplier == Decimal("1.00")
        assert outcome.bonus_earned == Decimal("50")
        assert outcome.is_late is False

    def test_late_beyond_tolerance(self, kpi_config):
        """Five days late gets the late penalty multiplier."""
        outcome = calculate_task_bonus(make_task(days_after_due=5), kpi_config)

        assert outcome.applied_multiplier == Decimal("0.50")
        assert outcome.bonus_earned == Decimal("25")
        assert outcome.is_late is True
        assert outcome.days_overdue == 5

    def test_exactly_at_tolerance_is_on_time(self, kpi_config):
        outcome = calculate_task_bonus(make_task(days_after_due=3), kpi_config)

        assert outcome.is_late is False
        assert outcome.applied_multiplier == Decimal("1.00")

    def test_just_past_tolerance_is_late(self, kpi_config):
        """One second past the tolerance window rounds up to a fourth day."""
        outcome = calculate_task_bonus(
            make_task(days_after_due=3 + 1 / 86400), kpi_config
        )

        assert outcome.days_overdue == 4
        assert outcome.is_late is True

    def test_early_completion_is_on_time(self, kpi_config):
        outcome = calculate_task_bonus(make_task(days_after_due=-4), kpi_config)

        assert outcome.applied_multiplier == Decimal("1.00")
        assert outcome.days_overdue == -4

    def test_repair_earns_issue_points(self, kpi_config):
        outcome = calculate_task_bonus(make_task("REPAIR"), kpi_config)

        assert outcome.kpi_points == Decimal("3")
        assert outcome.bonus_earned == Decimal("150")

    def test_late_repair(self, kpi_config):
        outcome = calculate_task_bonus(make_task("REPAIR", days_after_due=10), kpi_config)

        # 3 points x 50 x 0.5
        assert outcome.bonus_earned == Decimal("75")

    def test_disabled_config_is_neutral(self, kpi_config):
        kpi_config["enabled"] = False

        outcome = calculate_task_bonus(make_task("REPAIR", days_after_due=10), kpi_config)

        assert outcome.bonus_earned == Decimal("0")
        assert outcome.kpi_points == Decimal("1")
        assert outcome.applied_multiplier == Decimal("1")

    def test_unset_bonus_per_point_yields_zero(self):
        outcome = calculate_task_bonus(make_task(), {"enabled": True})

        assert outcome.kpi_points == Decimal("1")
        assert outcome.bonus_earned == Decimal("0")

    def test_custom_multipliers(self):
        config = make_kpi_config(on_time_multiplier="1.25", late_penalty_multiplier=0)

        on_time = calculate_task_bonus(make_task(), config)
        late = calculate_task_bonus(make_task(days_after_due=30), config)

        assert on_time.bonus_earned == Decimal("62.5")
        assert late.bonus_earned == Decimal("0")

    def test_idempotent(self, kpi_config):
        task = make_task("REPAIR", days_after_due=4.5)

        assert calculate_task_bonus(task, kpi_config) == calculate_task_bonus(task, kpi_config)


class TestRejectionReset:
    """Test the outcome stored on rejected completions."""

    def test_reset_zeroes_outcome(self):
        outcome = reset_task_outcome()

        assert outcome.bonus_earned == Decimal("0")
        assert outcome.kpi_points == Decimal("0")
        assert outcome.applied_multiplier == Decimal("0")
        assert outcome.is_late is False


class TestMonthlyRating:
    """Test the efficiency rating multiplier."""

    def test_no_tasks_counts_as_full_efficiency(self, kpi_config):
        result = calculate_monthly_rating(MonthlyTaskStats(total_tasks=0, completed_tasks=0), kpi_config)

        assert result.efficiency_percent == Decimal("100")
        assert result.rating_multiplier == Decimal("1.2")

    def test_super_bonus_at_target(self, kpi_config):
        stats = MonthlyTaskStats(total_tasks=10, completed_tasks=9, raw_bonus_sum=Decimal("1000"))

        result = calculate_monthly_rating(stats, kpi_config)

        assert result.efficiency_percent == Decimal("90")
        assert result.rating_tier == "super_bonus"
        assert result.projected_bonus == Decimal("1200")

    def test_standard_between_80_and_target(self, kpi_config):
        stats = MonthlyTaskStats(total_tasks=10, completed_tasks=8, raw_bonus_sum=Decimal("1000"))

        result = calculate_monthly_rating(stats, kpi_config)

        assert result.rating_multiplier == Decimal("1.0")
        assert result.projected_bonus == Decimal("1000")

    def test_reduced_between_min_and_80(self, kpi_config):
        stats = MonthlyTaskStats(total_tasks=3, completed_tasks=2, raw_bonus_sum=Decimal("300"))

        result = calculate_monthly_rating(stats, kpi_config)

        assert result.rating_tier == "reduced"
        assert result.projected_bonus == Decimal("240")

    def test_exactly_min_is_reduced_not_forfeited(self, kpi_config):
        stats = MonthlyTaskStats(total_tasks=4, completed_tasks=2, raw_bonus_sum=Decimal("100"))

        result = calculate_monthly_rating(stats, kpi_config)

        assert result.rating_multiplier == Decimal("0.8")

    @pytest.mark.parametrize("raw_bonus", ["0", "125.50", "99999"])
    def test_below_min_forfeits_everything(self, kpi_config, raw_bonus):
        stats = MonthlyTaskStats(total_tasks=10, completed_tasks=4, raw_bonus_sum=Decimal(raw_bonus))

        result = calculate_monthly_rating(stats, kpi_config)

        assert result.rating_multiplier == Decimal("0")
        assert result.projected_bonus == Decimal("0")
        assert result.rating_tier == "forfeited"

    def test_custom_target_and_minimum(self):
        config = make_kpi_config(target_efficiency_percent=75, min_efficiency_percent=30)
        stats = MonthlyTaskStats(total_tasks=4, completed_tasks=3, raw_bonus_sum=Decimal("100"))

        result = calculate_monthly_rating(stats, config)

        assert result.rating_multiplier == Decimal("1.2")

    def test_custom_efficiency_thresholds(self):
        config = make_kpi_config(
            efficiency_thresholds=[
                {"from_percent": 0, "multiplier": 0.5},
                {"from_percent": 95, "multiplier": 1.5},
                {"from_percent": 70, "multiplier": 1},
            ]
        )
        stats = MonthlyTaskStats(total_tasks=10, completed_tasks=7, raw_bonus_sum=Decimal("200"))

        result = calculate_monthly_rating(stats, config)

        assert result.rating_tier == "custom"
        assert result.rating_multiplier == Decimal("1")
        assert result.projected_bonus == Decimal("200")

    def test_custom_thresholds_no_match_is_neutral(self):
        config = make_kpi_config(efficiency_thresholds=[{"from_percent": 60, "multiplier": 2}])
        stats = MonthlyTaskStats(total_tasks=10, completed_tasks=1, raw_bonus_sum=Decimal("50"))

        result = calculate_monthly_rating(stats, config)

        assert result.rating_multiplier == Decimal("1.0")


class TestMonthCompletionBonus:
    """Test the bonus for clearing a month's tasks."""

    def test_awarded_when_nothing_left(self, kpi_config):
        bonus = calculate_month_completion_bonus(0, kpi_config)

        assert bonus.awarded is True
        assert bonus.bonus_amount == Decimal("50")

    def test_not_awarded_with_open_tasks(self, kpi_config):
        bonus = calculate_month_completion_bonus(2, kpi_config)

        assert bonus.awarded is False
        assert bonus.bonus_amount == Decimal("0")

    def test_not_awarded_when_disabled(self, kpi_config):
        kpi_config["enabled"] = False

        assert calculate_month_completion_bonus(0, kpi_config).awarded is False
