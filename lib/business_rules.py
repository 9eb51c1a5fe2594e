# =============================================================================
# lib/business_rules.py - Plausibility Checks on Canonical Rows
# =============================================================================
# Simple threshold checks that flag rows which look wrong for a marketing
# dashboard (negative spend, absurd ROAS, dates in the future). They only
# produce warnings; validity of a row is decided by lib/mapper.validate_data.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from core.models import BusinessRuleReport

logger = logging.getLogger(__name__)

MAX_PLAUSIBLE_ROAS = 50.0


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def check_row(row: dict[str, Any], index: int, now: datetime) -> list[str]:
    """Warnings for a single row. `index` is 0-based, messages are 1-based."""
    warnings = []
    label = f"Row {index + 1}"

    ad_spend = _number(row.get("ad_spend"))
    revenue = _number(row.get("revenue"))

    if ad_spend is not None and ad_spend < 0:
        warnings.append(f"{label}: negative ad spend")
    if revenue is not None and revenue < 0:
        warnings.append(f"{label}: negative revenue")

    if ad_spend and revenue and ad_spend > 0 and revenue > 0:
        roas = revenue / ad_spend
        if roas > MAX_PLAUSIBLE_ROAS:
            warnings.append(f"{label}: very high ROAS ({roas:.2f}x), check the data")

    row_date = row.get("date")
    if isinstance(row_date, datetime) and _as_naive_utc(row_date) > _as_naive_utc(now):
        warnings.append(f"{label}: date is in the future")

    if not row.get("store_name") and not row.get("store_id"):
        warnings.append(f"{label}: missing store")
    if not row.get("channel"):
        warnings.append(f"{label}: missing channel")

    return warnings


def validate_business_rules(
    data: list[dict[str, Any]],
    now: datetime | None = None,
) -> BusinessRuleReport:
    """
    Check canonical rows against business plausibility rules.

    Args:
        data: Canonical rows (as produced by transform_data)
        now: Reference time for the future-date check (defaults to the
             current UTC time)

    Returns:
        BusinessRuleReport; valid is True only when there are no warnings
    """
    now = now or datetime.now(timezone.utc)
    warnings: list[str] = []

    for index, row in enumerate(data):
        warnings.extend(check_row(row, index, now))

    if warnings:
        logger.info(f"Business rule check: {len(warnings)} warnings over {len(data)} rows")

    return BusinessRuleReport(valid=not warnings, warnings=warnings)
