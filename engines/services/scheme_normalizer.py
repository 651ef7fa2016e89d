"""
Scheme Normalizer

Converts stored compensation scheme documents into the closed variant
models the salary calculator works on.

Stored documents come in two shapes:
- current: ``{"base": {"type", "amount", "percent", "full_shift_hours"}, "bonuses": [...]}``
- legacy: the same base fields directly on the scheme

Nested ``base`` fields win; flat fields are the fallback. Normalization
never raises: unknown types become ``UnknownBase``/``UnscoredBonus`` and
missing or non-numeric fields take their defaults.
"""

from collections.abc import Mapping
from typing import Any

from engines.schemas.common import ZERO
from engines.schemas.compensation import (
    DEFAULT_FULL_SHIFT_HOURS,
    BasePay,
    BonusRule,
    BonusTier,
    ChecklistBonus,
    CompensationScheme,
    FixedBonus,
    HourlyBase,
    PenaltyBonus,
    PercentRevenueBase,
    PercentRevenueBonus,
    PercentThreshold,
    PeriodBonus,
    ProgressivePercentBonus,
    ProratedBase,
    TieredBonus,
    UnknownBase,
    UnscoredBonus,
)
from engines.services.numeric import decimal_or, to_decimal, to_int


def normalize_scheme(raw: CompensationScheme | Mapping[str, Any] | None) -> CompensationScheme:
    """Build a ``CompensationScheme`` from a stored scheme document."""
    if isinstance(raw, CompensationScheme):
        return raw
    if not isinstance(raw, Mapping):
        raw = {}

    bonuses = raw.get("bonuses")
    period_bonuses = raw.get("period_bonuses")

    return CompensationScheme(
        base=normalize_base(raw),
        bonuses=[normalize_bonus(entry) for entry in _as_list(bonuses)],
        period_bonuses=[normalize_period_bonus(entry) for entry in _as_list(period_bonuses)],
    )


def normalize_base(raw: Mapping[str, Any]) -> BasePay:
    """Resolve base pay, preferring ``base.X`` over flat ``X``."""
    nested = raw.get("base")
    if not isinstance(nested, Mapping):
        nested = {}

    def pick(field: str) -> Any:
        value = nested.get(field)
        return raw.get(field) if value is None else value

    base_type = nested.get("type") or raw.get("type")

    if base_type == "hourly":
        return HourlyBase(amount=decimal_or(pick("amount"), ZERO))
    if base_type in ("fixed", "per_shift"):
        return ProratedBase(
            kind=base_type,
            amount=decimal_or(pick("amount"), ZERO),
            full_shift_hours=decimal_or(pick("full_shift_hours"), DEFAULT_FULL_SHIFT_HOURS),
        )
    if base_type == "percent_revenue":
        return PercentRevenueBase(percent=decimal_or(pick("percent"), ZERO))

    return UnknownBase(declared_type=None if base_type is None else str(base_type))


def normalize_bonus(entry: Any) -> BonusRule:
    """Build one bonus rule variant from a stored rule entry."""
    if not isinstance(entry, Mapping):
        return UnscoredBonus(name="bonus")

    rule_type = entry.get("type")
    name = str(entry.get("name") or rule_type or "bonus")
    common = {"name": name, "source": str(entry.get("source") or "total")}

    if rule_type == "fixed":
        return FixedBonus(**common, amount=decimal_or(entry.get("amount"), ZERO))

    if rule_type == "percent_revenue":
        return PercentRevenueBonus(**common, percent=decimal_or(entry.get("percent"), ZERO))

    if rule_type == "tiered":
        tiers = [_tier(tier) for tier in _as_list(entry.get("tiers")) if isinstance(tier, Mapping)]
        return TieredBonus(**common, tiers=tiers)

    if rule_type == "progressive_percent":
        thresholds = [
            PercentThreshold(
                lower=decimal_or(item.get("from"), ZERO),
                percent=decimal_or(item.get("percent"), ZERO),
            )
            for item in _as_list(entry.get("thresholds"))
            if isinstance(item, Mapping)
        ]
        # Stable sort: equal thresholds keep their configured order
        thresholds.sort(key=lambda item: item.lower, reverse=True)
        return ProgressivePercentBonus(**common, thresholds=thresholds)

    if rule_type == "penalty":
        return PenaltyBonus(**common, amount=decimal_or(entry.get("amount"), ZERO))

    if rule_type == "checklist":
        return ChecklistBonus(
            name=str(entry.get("name") or "Checklist bonus"),
            template_id=to_int(entry.get("checklist_template_id")),
            min_score=decimal_or(entry.get("min_score"), ZERO),
            amount=decimal_or(entry.get("amount"), ZERO),
            mode="MONTH" if entry.get("mode") == "MONTH" else "SHIFT",
        )

    return UnscoredBonus(
        **common,
        declared_type=None if rule_type is None else str(rule_type),
    )


def normalize_period_bonus(entry: Any) -> PeriodBonus:
    if not isinstance(entry, Mapping):
        return PeriodBonus()

    return PeriodBonus(
        name=str(entry.get("name") or "KPI"),
        metric_key=str(entry.get("metric_key") or "total_revenue"),
        reward_value=decimal_or(entry.get("current_reward_value"), ZERO),
        reward_type="FIXED" if entry.get("current_reward_type") == "FIXED" else "PERCENT",
    )


def _tier(item: Mapping[str, Any]) -> BonusTier:
    # "bonus" is the current field name, "amount" the older one
    bonus = to_decimal(item.get("bonus"))
    if bonus is None:
        bonus = decimal_or(item.get("amount"), ZERO)

    # "∞", null, 0 and other non-numeric bounds mean unbounded
    upper = to_decimal(item.get("to"))
    if upper == ZERO:
        upper = None

    return BonusTier(
        lower=decimal_or(item.get("from"), ZERO),
        upper=upper,
        bonus=bonus,
    )


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []
