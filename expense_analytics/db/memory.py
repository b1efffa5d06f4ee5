"""
In-process record source for local development and tests.
"""
from collections import defaultdict
from threading import Lock
from typing import Dict, List, Optional

from expense_analytics.models.records import Category, ExpenseRecord
from expense_analytics.utils.calendar_window import DateWindow


class InMemoryRecordSource:
    def __init__(self) -> None:
        self._lock = Lock()
        self._expenses: Dict[str, List[ExpenseRecord]] = defaultdict(list)
        self._categories: Dict[str, Dict[str, Category]] = defaultdict(dict)

    def get_categories(self, user_id: str) -> Dict[str, Category]:
        with self._lock:
            return dict(self._categories.get(user_id, {}))

    def get_expenses(self, user_id: str, window: Optional[DateWindow] = None) -> List[ExpenseRecord]:
        with self._lock:
            records = list(self._expenses.get(user_id, []))
        if window is not None:
            records = window.filter(records)
        return sorted(records, key=lambda record: (record.date, record.id))

    def get_recent_expenses(self, user_id: str, limit: int) -> List[ExpenseRecord]:
        records = self.get_expenses(user_id)
        records.reverse()
        return records[:limit]

    def put_expense(self, user_id: str, record: ExpenseRecord) -> ExpenseRecord:
        with self._lock:
            self._expenses[user_id].append(record)
        return record

    def put_category(self, user_id: str, category: Category) -> Category:
        with self._lock:
            self._categories[user_id][category.id] = category
        return category

    def clear(self) -> None:
        with self._lock:
            self._expenses.clear()
            self._categories.clear()
