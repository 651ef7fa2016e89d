"""
Salary Calculator

Pure calculation logic for shift salaries: base pay plus every
configured bonus, penalty and KPI contribution, with an itemized
breakdown for audit.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, Callable

from engines.schemas.common import HUNDRED, ZERO
from engines.schemas.compensation import (
    BasePay,
    BonusLine,
    ChecklistBonus,
    CompensationScheme,
    FixedBonus,
    HourlyBase,
    PenaltyBonus,
    PercentRevenueBase,
    PercentRevenueBonus,
    PeriodBonus,
    PeriodMetrics,
    ProgressivePercentBonus,
    ProratedBase,
    SalaryBreakdown,
    SalaryResult,
    ShiftEvaluation,
    TieredBonus,
    UnscoredBonus,
)
from engines.services.numeric import decimal_or, round_money, to_decimal, to_int
from engines.services.report_metrics import coerce_metrics
from engines.services.scheme_normalizer import normalize_scheme

MAINTENANCE_BONUS_KEY = "maintenance_bonus"


def calculate_salary(
    hours_worked: Any,
    scheme: CompensationScheme | Mapping[str, Any] | None,
    metrics: Mapping[str, Any] | None = None,
    evaluations: Iterable[ShiftEvaluation | Mapping[str, Any]] | None = None,
) -> SalaryResult:
    """
    Calculate the salary earned for one shift.

    Algorithm:
    1. Normalize the scheme document and coerce metrics to Decimals
    2. Compute base pay from the base variant
    3. Evaluate every bonus rule in list order (zero results included)
    4. Add percent-reward period bonuses
    5. Add the accrued equipment maintenance bonus, if any
    6. Round the full-precision running total to cents

    Never raises for malformed configuration: bad parts contribute 0
    and are described in ``calculation_notes``.
    """
    notes: list[str] = []
    normalized = normalize_scheme(scheme)
    period_metrics = coerce_metrics(metrics)
    shift_evaluations = _coerce_evaluations(evaluations)

    hours = to_decimal(hours_worked)
    if hours is None:
        notes.append(f"Hours worked {hours_worked!r} is not a usable number; using 0")
        hours = ZERO

    # Step 2: base pay
    base_amount = calculate_base_pay(normalized.base, hours, period_metrics, notes)
    total = base_amount
    lines: list[BonusLine] = []

    # Step 3: per-shift bonus rules
    for rule in normalized.bonuses:
        if isinstance(rule, ChecklistBonus):
            amount, line = _checklist_line(rule, shift_evaluations)
        else:
            source_value = period_metrics.get(rule.metric_key, ZERO)
            amount = evaluate_bonus(rule, source_value)
            line = BonusLine(
                name=rule.name,
                amount=round_money(amount),
                source_key=rule.source,
                source_value=source_value,
            )
            if isinstance(rule, UnscoredBonus):
                notes.append(
                    f"Bonus rule '{rule.name}' has unsupported type "
                    f"{rule.declared_type!r}; contributed 0"
                )
        lines.append(line)
        total += amount

    # Step 4: period bonus contributions
    for period_bonus in normalized.period_bonuses:
        amount, line = _period_bonus_line(period_bonus, period_metrics)
        lines.append(line)
        total += amount

    # Step 5: equipment maintenance accrual
    maintenance_bonus = period_metrics.get(MAINTENANCE_BONUS_KEY, ZERO)
    if maintenance_bonus > 0:
        amount = round_money(maintenance_bonus)
        lines.append(
            BonusLine(
                name="Equipment maintenance",
                kind="EQUIPMENT_MAINTENANCE",
                amount=amount,
                source_key=MAINTENANCE_BONUS_KEY,
                source_value=maintenance_bonus,
            )
        )
        total += amount

    # Step 6: round once at the end
    final_total = round_money(total)

    return SalaryResult(
        total=final_total,
        breakdown=SalaryBreakdown(
            base=round_money(base_amount),
            bonuses=lines,
            total=final_total,
        ),
        calculation_notes=notes,
    )


def calculate_base_pay(
    base: BasePay,
    hours_worked: Decimal,
    metrics: PeriodMetrics,
    notes: list[str] | None = None,
) -> Decimal:
    """Unrounded base pay for one shift."""
    if notes is None:
        notes = []

    if isinstance(base, HourlyBase):
        return base.amount * hours_worked

    if isinstance(base, ProratedBase):
        if base.full_shift_hours <= 0:
            notes.append(
                f"Full shift hours is {base.full_shift_hours}; paying the full {base.kind} amount"
            )
            return base.amount
        if hours_worked >= base.full_shift_hours:
            return base.amount
        return base.amount * hours_worked / base.full_shift_hours

    if isinstance(base, PercentRevenueBase):
        return metrics.get("total_revenue", ZERO) * base.percent / HUNDRED

    notes.append(f"Unknown base pay type {base.declared_type!r}; base pay set to 0")
    return ZERO


# ---------------------------------------------------------------------------
# Bonus rule evaluators
# ---------------------------------------------------------------------------


def _fixed(rule: FixedBonus, source_value: Decimal) -> Decimal:
    return rule.amount


def _percent_revenue(rule: PercentRevenueBonus, source_value: Decimal) -> Decimal:
    return source_value * rule.percent / HUNDRED


def _tiered(rule: TieredBonus, source_value: Decimal) -> Decimal:
    # First matching tier in configured order wins
    for tier in rule.tiers:
        if tier.contains(source_value):
            return tier.bonus
    return ZERO


def _progressive_percent(rule: ProgressivePercentBonus, source_value: Decimal) -> Decimal:
    # Thresholds are sorted highest first, so the first match is the best rate
    for threshold in rule.thresholds:
        if source_value >= threshold.lower:
            return source_value * threshold.percent / HUNDRED
    return ZERO


def _penalty(rule: PenaltyBonus, source_value: Decimal) -> Decimal:
    return -rule.amount


def _unscored(rule: UnscoredBonus, source_value: Decimal) -> Decimal:
    return ZERO


RULE_EVALUATORS: dict[type, Callable[[Any, Decimal], Decimal]] = {
    FixedBonus: _fixed,
    PercentRevenueBonus: _percent_revenue,
    TieredBonus: _tiered,
    ProgressivePercentBonus: _progressive_percent,
    PenaltyBonus: _penalty,
    UnscoredBonus: _unscored,
}


def evaluate_bonus(rule: Any, source_value: Decimal) -> Decimal:
    """Unrounded contribution of a metric-driven bonus rule."""
    evaluator = RULE_EVALUATORS.get(type(rule), _unscored)
    return evaluator(rule, source_value)


def _checklist_line(
    rule: ChecklistBonus,
    evaluations: list[ShiftEvaluation],
) -> tuple[Decimal, BonusLine]:
    evaluation = None
    if rule.template_id is not None:
        evaluation = next(
            (item for item in evaluations if item.template_id == rule.template_id),
            None,
        )
    score = evaluation.score_percent if evaluation else ZERO

    amount = ZERO
    # Month-mode checklist bonuses are settled with the monthly payroll
    if rule.mode == "SHIFT" and evaluation is not None and score >= rule.min_score:
        amount = rule.amount

    line = BonusLine(
        name=rule.name,
        kind="CHECKLIST_BONUS",
        amount=round_money(amount),
        source_key=rule.source,
        source_value=score,
        template_id=rule.template_id,
    )
    return amount, line


def _period_bonus_line(
    bonus: PeriodBonus,
    metrics: PeriodMetrics,
) -> tuple[Decimal, BonusLine]:
    metric_value = metrics.get(bonus.metric_key, ZERO)

    amount = ZERO
    if bonus.reward_type == "PERCENT":
        amount = metric_value * bonus.reward_value / HUNDRED

    line = BonusLine(
        name=bonus.name,
        kind="PERIOD_BONUS_CONTRIBUTION",
        amount=round_money(amount),
        source_key=bonus.metric_key,
        source_value=metric_value,
        reward_value=bonus.reward_value,
        reward_type=bonus.reward_type,
    )
    return amount, line


def _coerce_evaluations(
    evaluations: Iterable[ShiftEvaluation | Mapping[str, Any]] | None,
) -> list[ShiftEvaluation]:
    result: list[ShiftEvaluation] = []
    for item in evaluations or []:
        if isinstance(item, ShiftEvaluation):
            result.append(item)
            continue
        if not isinstance(item, Mapping):
            continue
        template_id = to_int(item.get("template_id"))
        if template_id is None:
            continue
        result.append(
            ShiftEvaluation(
                template_id=template_id,
                score_percent=decimal_or(item.get("score_percent"), ZERO),
            )
        )
    return result
