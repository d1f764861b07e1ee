"""Grouping and timeline helpers for bonus events."""

from __future__ import annotations

import calendar
from typing import Dict, Iterable, List

from pydantic import BaseModel

from ledger.models import BonusEvent

MONTHS = range(1, 13)


class TimelineEntry(BaseModel):
    year: int
    month: int
    month_label: str
    total_amount: float
    bonuses: List[BonusEvent]


def group_by_month(bonuses: Iterable[BonusEvent]) -> Dict[int, List[BonusEvent]]:
    """Partition bonuses by month; months without a bonus are left out."""
    groups: Dict[int, List[BonusEvent]] = {}
    for bonus in bonuses:
        groups.setdefault(bonus.month, []).append(
            bonus.model_copy(update={"amount": round(bonus.amount, 2)})
        )
    return groups


def monthly_totals(bonuses: Iterable[BonusEvent]) -> Dict[int, float]:
    """Aggregated bonus amount per calendar month (1..12 only)."""
    totals: Dict[int, float] = {}
    for bonus in bonuses:
        if bonus.month in MONTHS:
            totals[bonus.month] = totals.get(bonus.month, 0.0) + bonus.amount
    return totals


def timeline(bonuses: Iterable[BonusEvent], years: int = 10) -> List[TimelineEntry]:
    """
    One entry per (year, month) that receives bonuses, for years 1..years.

    Ordered year-major, month-minor. Bonuses whose month is outside 1..12
    never appear.
    """
    groups = group_by_month(bonuses)
    entries: List[TimelineEntry] = []
    for year in range(1, years + 1):
        for month in MONTHS:
            group = groups.get(month)
            if not group:
                continue
            entries.append(
                TimelineEntry(
                    year=year,
                    month=month,
                    month_label=calendar.month_name[month],
                    total_amount=round(sum(bonus.amount for bonus in group), 2),
                    bonuses=group,
                )
            )
    return entries


__all__ = ["TimelineEntry", "group_by_month", "monthly_totals", "timeline"]
