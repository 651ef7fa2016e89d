"""
Report Metrics

Builds the numeric metrics map a salary calculation reads from the
free-form data an employee submits when closing a shift.
"""

from collections.abc import Mapping
from typing import Any

from engines.schemas.common import ZERO
from engines.schemas.compensation import PeriodMetrics
from engines.services.numeric import to_decimal


def coerce_metrics(raw: Mapping[str, Any] | None) -> PeriodMetrics:
    """
    Keep only the numeric entries of ``raw``.

    Numeric strings are parsed; booleans, blanks, NaN and any other
    non-numeric value are dropped (and therefore read as 0 later).
    """
    metrics: PeriodMetrics = {}
    if not isinstance(raw, Mapping):
        return metrics

    for key, value in raw.items():
        number = to_decimal(value)
        if number is not None:
            metrics[str(key)] = number
    return metrics


def extract_report_metrics(report_data: Mapping[str, Any] | None) -> PeriodMetrics:
    """
    Derive period metrics from a shift report.

    The revenue keys are always present:
    - ``revenue_cash`` from ``cash_income``
    - ``revenue_card`` from ``card_income``
    - ``total_revenue`` from the report's own ``total_revenue`` when it is
      set and non-zero, otherwise cash + card

    Every other numeric report field is copied under its own key
    (``cash_income`` and ``card_income`` included).
    """
    report = report_data if isinstance(report_data, Mapping) else {}

    cash = to_decimal(report.get("cash_income")) or ZERO
    card = to_decimal(report.get("card_income")) or ZERO
    reported_total = to_decimal(report.get("total_revenue"))

    metrics = coerce_metrics(report)
    metrics.setdefault("revenue_cash", cash)
    metrics.setdefault("revenue_card", card)
    metrics["total_revenue"] = reported_total if reported_total else cash + card
    return metrics
