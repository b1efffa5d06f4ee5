from functools import lru_cache
from typing import Dict, List, Optional, Protocol
import logging

from expense_analytics.core.config import settings
from expense_analytics.models.records import Category, ExpenseRecord
from expense_analytics.utils.calendar_window import DateWindow

logger = logging.getLogger(__name__)


class RecordSource(Protocol):
    """User-scoped access to expenses and categories."""

    def get_categories(self, user_id: str) -> Dict[str, Category]: ...

    def get_expenses(self, user_id: str, window: Optional[DateWindow] = None) -> List[ExpenseRecord]: ...

    def get_recent_expenses(self, user_id: str, limit: int) -> List[ExpenseRecord]: ...

    def put_expense(self, user_id: str, record: ExpenseRecord) -> ExpenseRecord: ...

    def put_category(self, user_id: str, category: Category) -> Category: ...


@lru_cache
def get_record_source() -> RecordSource:
    """Build the configured backend once per process (FastAPI dependency)."""
    backend = settings.RECORD_BACKEND.lower()
    logger.info(f"Using '{backend}' record source")
    if backend == "memory":
        from expense_analytics.db.memory import InMemoryRecordSource

        return InMemoryRecordSource()
    if backend == "dynamo":
        from expense_analytics.db.dynamo import DynamoRecordSource

        return DynamoRecordSource.from_settings()
    raise ValueError(f"Unknown RECORD_BACKEND: {settings.RECORD_BACKEND}")
