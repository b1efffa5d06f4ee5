"""
Calendar windows shared by every report.

All month rollover arithmetic lives here so the category, trend, monthly and
summary reports agree on where a month starts and ends.
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple

from expense_analytics.core.errors import InvalidParameter
from expense_analytics.models.records import ExpenseRecord


@dataclass(frozen=True)
class DateWindow:
    """Inclusive range of calendar dates."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def filter(self, records: Iterable[ExpenseRecord]) -> List[ExpenseRecord]:
        return [record for record in records if self.contains(record.date)]


def require_positive(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidParameter(name, value)
    return value


def validate_year_month(year, month) -> Tuple[int, int]:
    require_positive("year", year)
    if year > date.max.year:
        raise InvalidParameter("year", year, f"must be at most {date.max.year}")
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidParameter("month", month, "must be between 1 and 12")
    return year, month


def month_key(day: date) -> int:
    """Monotonic integer for (year, month); orders correctly across years."""
    return day.year * 12 + (day.month - 1)


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_window(year: int, month: int) -> DateWindow:
    year, month = validate_year_month(year, month)
    last_day = calendar.monthrange(year, month)[1]
    return DateWindow(date(year, month, 1), date(year, month, last_day))


def previous_month(year: int, month: int) -> Tuple[int, int]:
    """January rolls back to December of the previous year."""
    year, month = validate_year_month(year, month)
    prev_year, prev_month = shift_month(year, month, -1)
    if prev_year < 1:
        raise InvalidParameter("year", year, "has no previous month")
    return prev_year, prev_month


def last_n_days(days: int, today: Optional[date] = None) -> DateWindow:
    """Window of ``days`` dates ending today: (today - days, today]."""
    require_positive("days", days)
    today = today or date.today()
    try:
        start = today - timedelta(days=days - 1)
    except OverflowError:
        raise InvalidParameter("days", days, "reaches before the earliest supported date")
    return DateWindow(start, today)


def last_n_months(months: int, today: Optional[date] = None) -> DateWindow:
    """Window from the first day of the month ``months - 1`` back through today."""
    require_positive("months", months)
    today = today or date.today()
    start_year, start_month = shift_month(today.year, today.month, -(months - 1))
    if start_year < 1:
        raise InvalidParameter("months", months, "reaches before the earliest supported date")
    return DateWindow(date(start_year, start_month, 1), today)


def current_and_previous_month(today: Optional[date] = None) -> Tuple[DateWindow, DateWindow]:
    today = today or date.today()
    prev_year, prev_month = previous_month(today.year, today.month)
    return month_window(today.year, today.month), month_window(prev_year, prev_month)
