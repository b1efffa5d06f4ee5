from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Mapping, Optional

from expense_analytics.core.errors import UnresolvedReference
from expense_analytics.models.records import Category, ExpenseRecord
from expense_analytics.utils.calendar_window import current_and_previous_month, month_key

CENTS = Decimal("0.01")
ZERO = Decimal("0")

# Fixed English abbreviations so labels never depend on the process locale.
MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def to_money(amount: Decimal) -> float:
    return float(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


@dataclass
class CategoryAggregate:
    """Spend for one category name."""

    name: str
    color: str
    icon: Optional[str] = None
    amount: Decimal = ZERO
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["amount"] = to_money(self.amount)
        return data


@dataclass
class DailyAggregate:
    date: str
    amount: Decimal = ZERO
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "amount": to_money(self.amount), "count": self.count}


@dataclass
class MonthlyAggregate:
    year: int
    month: int
    month_label: str
    amount: Decimal = ZERO
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["amount"] = to_money(self.amount)
        return data


@dataclass
class PeriodTotals:
    total: Decimal = ZERO
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"total": to_money(self.total), "count": self.count}


@dataclass
class SummaryReport:
    current_month: PeriodTotals
    previous_month: PeriodTotals
    total_spent: Decimal
    total_transactions: int
    monthly_change_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_month": self.current_month.to_dict(),
            "previous_month": self.previous_month.to_dict(),
            "total_spent": to_money(self.total_spent),
            "total_transactions": self.total_transactions,
            "monthly_change_percent": self.monthly_change_percent,
        }


def month_label(year: int, month: int) -> str:
    return f"{MONTH_ABBR[month - 1]} {year}"


class SpendingAnalyzer:
    """
    Pure aggregation over expense records.

    Every method recomputes its result from the records it is given; the
    analyzer keeps no state between calls, so one instance can be shared by
    concurrent requests.
    """

    def category_breakdown(
        self,
        records: Iterable[ExpenseRecord],
        categories: Mapping[str, Category],
    ) -> List[CategoryAggregate]:
        """
        Group spend by category display name.

        Two categories sharing a name land in the same bucket; the first one
        seen supplies color and icon.
        """
        buckets: Dict[str, CategoryAggregate] = {}
        for record in records:
            category = categories.get(record.category_id)
            if category is None:
                raise UnresolvedReference(record.id, record.category_id)
            bucket = buckets.get(category.name)
            if bucket is None:
                bucket = buckets[category.name] = CategoryAggregate(
                    name=category.name, color=category.color, icon=category.icon
                )
            bucket.amount += record.amount
            bucket.count += 1
        return list(buckets.values())

    def daily_trend(self, records: Iterable[ExpenseRecord]) -> List[DailyAggregate]:
        """Spend per calendar date, ascending; dates without records are omitted."""
        buckets: Dict[str, DailyAggregate] = {}
        for record in records:
            key = record.date.isoformat()
            bucket = buckets.setdefault(key, DailyAggregate(date=key))
            bucket.amount += record.amount
            bucket.count += 1
        return [buckets[key] for key in sorted(buckets)]

    def monthly_comparison(self, records: Iterable[ExpenseRecord]) -> List[MonthlyAggregate]:
        """Spend per (year, month), chronological; empty months are omitted."""
        buckets: Dict[int, MonthlyAggregate] = {}
        for record in records:
            key = month_key(record.date)
            bucket = buckets.get(key)
            if bucket is None:
                year, month = record.date.year, record.date.month
                bucket = buckets[key] = MonthlyAggregate(
                    year=year, month=month, month_label=month_label(year, month)
                )
            bucket.amount += record.amount
            bucket.count += 1
        return [buckets[key] for key in sorted(buckets)]

    @staticmethod
    def totals(records: Iterable[ExpenseRecord]) -> PeriodTotals:
        result = PeriodTotals()
        for record in records:
            result.total += record.amount
            result.count += 1
        return result

    @staticmethod
    def monthly_change_percent(current: Decimal, previous: Decimal) -> float:
        """
        Signed percentage change from ``previous`` to ``current``.

        A zero previous month reports 0.0 rather than an infinite increase.
        """
        if previous == 0:
            return 0.0
        change = (current - previous) / previous * 100
        return float(change.quantize(CENTS, rounding=ROUND_HALF_UP))

    def summarize(
        self,
        current_month: Iterable[ExpenseRecord],
        previous_month: Iterable[ExpenseRecord],
        all_time: Iterable[ExpenseRecord],
    ) -> SummaryReport:
        current = self.totals(current_month)
        previous = self.totals(previous_month)
        overall = self.totals(all_time)
        return SummaryReport(
            current_month=current,
            previous_month=previous,
            total_spent=overall.total,
            total_transactions=overall.count,
            monthly_change_percent=self.monthly_change_percent(current.total, previous.total),
        )

    def summary_from_records(
        self,
        records: Iterable[ExpenseRecord],
        today: Optional[date] = None,
    ) -> SummaryReport:
        """Summary over the full record set, deriving the month subsets itself."""
        records = list(records)
        this_month, last_month = current_and_previous_month(today)
        return self.summarize(this_month.filter(records), last_month.filter(records), records)
