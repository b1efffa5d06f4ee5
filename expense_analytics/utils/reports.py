"""
Report service: validates window parameters, queries the record source and
hands the records to the analyzer.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from fastapi.concurrency import run_in_threadpool

from expense_analytics.core.config import settings
from expense_analytics.core.errors import InvalidParameter, InvalidReportType
from expense_analytics.db.source import RecordSource
from expense_analytics.utils.analyzer import SpendingAnalyzer
from expense_analytics.utils.calendar_window import (
    current_and_previous_month,
    last_n_days,
    last_n_months,
    month_window,
)

logger = logging.getLogger(__name__)


class ReportService:
    def __init__(
        self,
        source: RecordSource,
        analyzer: Optional[SpendingAnalyzer] = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.source = source
        self.analyzer = analyzer or SpendingAnalyzer()
        self.clock = clock

    def categories(self, user_id: str, year: Optional[int] = None, month: Optional[int] = None) -> List[Dict[str, Any]]:
        """Category breakdown, for one calendar month when year and month are given."""
        window = None
        if year is not None or month is not None:
            if year is None:
                raise InvalidParameter("year", year, "is required when month is given")
            if month is None:
                raise InvalidParameter("month", month, "is required when year is given")
            window = month_window(year, month)

        categories = self.source.get_categories(user_id)
        records = self.source.get_expenses(user_id, window)
        return [bucket.to_dict() for bucket in self.analyzer.category_breakdown(records, categories)]

    def trends(self, user_id: str, days: Optional[int] = None) -> List[Dict[str, Any]]:
        window = last_n_days(settings.DEFAULT_TREND_DAYS if days is None else days, self.clock())
        records = self.source.get_expenses(user_id, window)
        return [bucket.to_dict() for bucket in self.analyzer.daily_trend(records)]

    def monthly(self, user_id: str, months: Optional[int] = None) -> List[Dict[str, Any]]:
        window = last_n_months(settings.DEFAULT_MONTHLY_MONTHS if months is None else months, self.clock())
        records = self.source.get_expenses(user_id, window)
        return [bucket.to_dict() for bucket in self.analyzer.monthly_comparison(records)]

    async def summary(self, user_id: str) -> Dict[str, Any]:
        """
        Current month, previous month and all-time queries run concurrently.
        If any of them fails the whole summary fails.
        """
        this_month, last_month = current_and_previous_month(self.clock())
        current, previous, all_time = await asyncio.gather(
            run_in_threadpool(self.source.get_expenses, user_id, this_month),
            run_in_threadpool(self.source.get_expenses, user_id, last_month),
            run_in_threadpool(self.source.get_expenses, user_id, None),
        )
        return self.analyzer.summarize(current, previous, all_time).to_dict()

    async def build(
        self,
        report_type: Optional[str],
        user_id: str,
        year: Optional[int] = None,
        month: Optional[int] = None,
        days: Optional[int] = None,
        months: Optional[int] = None,
    ):
        """Dispatch on the report type discriminator."""
        logger.info(f"Building '{report_type}' report for user {user_id}")
        if report_type == "categories":
            return await run_in_threadpool(self.categories, user_id, year, month)
        if report_type == "trends":
            return await run_in_threadpool(self.trends, user_id, days)
        if report_type == "monthly":
            return await run_in_threadpool(self.monthly, user_id, months)
        if report_type == "summary":
            return await self.summary(user_id)
        raise InvalidReportType(report_type)
