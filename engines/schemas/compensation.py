"""
Compensation Schemas

Normalized compensation scheme variants and salary calculation output.

Stored schemes are loose JSON documents (flat legacy fields, nested
``base``, optional rule fields). They are converted into these models by
``engines.services.scheme_normalizer`` before any arithmetic happens, so
the salary calculator only ever sees closed, fully-defaulted variants.
"""

from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from engines.schemas.common import ZERO, Amount

# Metric key -> numeric value for one shift or pay period
PeriodMetrics = dict[str, Amount]

DEFAULT_FULL_SHIFT_HOURS = Decimal("12")

# Shorthand bonus sources and the metric keys they read
SOURCE_METRIC_KEYS: dict[str, str] = {
    "total": "total_revenue",
    "cash": "revenue_cash",
    "card": "revenue_card",
}


class _SchemeModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Base pay variants
# ---------------------------------------------------------------------------


class HourlyBase(_SchemeModel):
    """Pays ``amount`` for every hour worked."""

    kind: Literal["hourly"] = "hourly"
    amount: Amount = ZERO


class ProratedBase(_SchemeModel):
    """
    Fixed amount per shift.

    Shifts shorter than ``full_shift_hours`` are prorated linearly;
    longer shifts still earn exactly ``amount``.
    """

    kind: Literal["fixed", "per_shift"] = "fixed"
    amount: Amount = ZERO
    full_shift_hours: Amount = DEFAULT_FULL_SHIFT_HOURS


class PercentRevenueBase(_SchemeModel):
    """Pays ``percent`` of the shift's total revenue."""

    kind: Literal["percent_revenue"] = "percent_revenue"
    percent: Amount = ZERO


class UnknownBase(_SchemeModel):
    """Missing or unsupported base type. Always pays 0."""

    kind: Literal["unknown"] = "unknown"
    declared_type: str | None = None


BasePay = Union[HourlyBase, ProratedBase, PercentRevenueBase, UnknownBase]


# ---------------------------------------------------------------------------
# Bonus rule variants
# ---------------------------------------------------------------------------


class _BonusRuleBase(_SchemeModel):
    name: str
    source: str = "total"

    @property
    def metric_key(self) -> str:
        """Metric key this rule reads its source value from."""
        return SOURCE_METRIC_KEYS.get(self.source, self.source)


class FixedBonus(_BonusRuleBase):
    kind: Literal["fixed"] = "fixed"
    amount: Amount = ZERO


class PercentRevenueBonus(_BonusRuleBase):
    kind: Literal["percent_revenue"] = "percent_revenue"
    percent: Amount = ZERO


class BonusTier(_SchemeModel):
    """Closed interval ``[lower, upper]``; ``upper=None`` is unbounded."""

    lower: Amount = ZERO
    upper: Amount | None = None
    bonus: Amount = ZERO

    def contains(self, value: Decimal) -> bool:
        if value < self.lower:
            return False
        return self.upper is None or value <= self.upper


class TieredBonus(_BonusRuleBase):
    kind: Literal["tiered"] = "tiered"
    tiers: list[BonusTier] = Field(default_factory=list)


class PercentThreshold(_SchemeModel):
    lower: Amount = ZERO
    percent: Amount = ZERO


class ProgressivePercentBonus(_BonusRuleBase):
    """Thresholds are kept sorted by ``lower``, highest first."""

    kind: Literal["progressive_percent"] = "progressive_percent"
    thresholds: list[PercentThreshold] = Field(default_factory=list)


class PenaltyBonus(_BonusRuleBase):
    kind: Literal["penalty"] = "penalty"
    amount: Amount = ZERO


class ChecklistBonus(_BonusRuleBase):
    """Pays ``amount`` when the shift's checklist evaluation scores high enough."""

    kind: Literal["checklist"] = "checklist"
    source: str = "checklist_score"
    template_id: int | None = None
    min_score: Amount = ZERO
    amount: Amount = ZERO
    mode: Literal["SHIFT", "MONTH"] = "SHIFT"


class UnscoredBonus(_BonusRuleBase):
    """Rule with a missing or unsupported type. Always contributes 0."""

    kind: Literal["unscored"] = "unscored"
    declared_type: str | None = None


BonusRule = Union[
    FixedBonus,
    PercentRevenueBonus,
    TieredBonus,
    ProgressivePercentBonus,
    PenaltyBonus,
    ChecklistBonus,
    UnscoredBonus,
]


class PeriodBonus(_SchemeModel):
    """
    Monthly KPI bonus whose currently reached reward level is attached
    by the caller. Percent rewards contribute to every shift; fixed
    rewards are settled once per month and contribute nothing here.
    """

    name: str = "KPI"
    metric_key: str = "total_revenue"
    reward_value: Amount = ZERO
    reward_type: Literal["PERCENT", "FIXED"] = "PERCENT"


class CompensationScheme(_SchemeModel):
    """A normalized compensation scheme version."""

    base: BasePay = Field(default_factory=UnknownBase, discriminator="kind")
    bonuses: list[Annotated[BonusRule, Field(discriminator="kind")]] = Field(
        default_factory=list
    )
    period_bonuses: list[PeriodBonus] = Field(default_factory=list)


class ShiftEvaluation(BaseModel):
    """Checklist evaluation recorded for a shift."""

    template_id: int
    score_percent: Amount = ZERO


# ---------------------------------------------------------------------------
# Calculation output
# ---------------------------------------------------------------------------


class BonusLine(BaseModel):
    """One itemized breakdown entry, kept for audit and display."""

    name: str
    kind: Literal[
        "SHIFT_BONUS",
        "CHECKLIST_BONUS",
        "PERIOD_BONUS_CONTRIBUTION",
        "EQUIPMENT_MAINTENANCE",
    ] = "SHIFT_BONUS"
    amount: Amount = Field(..., description="Contribution rounded to 2 decimal places")
    source_key: str
    source_value: Amount | None = None
    template_id: int | None = None
    reward_value: Amount | None = None
    reward_type: str | None = None


class SalaryBreakdown(BaseModel):
    base: Amount
    bonuses: list[BonusLine] = Field(default_factory=list)
    total: Amount


class SalaryResult(BaseModel):
    """
    Output of a shift salary calculation.

    ``total`` is the full-precision sum of base pay and every
    contribution, rounded once at the end. The breakdown holds per-line
    rounded amounts, so line amounts may differ from ``total`` by rounding.
    """

    total: Amount
    breakdown: SalaryBreakdown
    calculation_notes: list[str] = Field(default_factory=list)
