from typing import List
import logging
import re

from fastapi import APIRouter, Depends, HTTPException, Query, status

from expense_analytics.core.config import settings
from expense_analytics.core.errors import InvalidParameter, UpstreamQueryFailure
from expense_analytics.db.source import RecordSource, get_record_source
from expense_analytics.models.expense import ExpenseCreate, ExpensePublic
from expense_analytics.routers.deps import get_current_user_id
from expense_analytics.utils.calendar_window import month_window

router = APIRouter()
logger = logging.getLogger(__name__)

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


@router.post("/", response_model=ExpensePublic, status_code=status.HTTP_201_CREATED)
def create_expense(
    expense: ExpenseCreate,
    user_id: str = Depends(get_current_user_id),
    source: RecordSource = Depends(get_record_source),
):
    try:
        categories = source.get_categories(user_id)
        category = categories.get(str(expense.category_id))
        if category is None:
            raise HTTPException(status_code=400, detail="Invalid category")

        record = source.put_expense(user_id, expense.to_record())
        logger.info(f"Created expense {record.id} for user {user_id}")
        return ExpensePublic.from_record(record, category)
    except HTTPException:
        raise
    except UpstreamQueryFailure as e:
        logger.error(f"Error creating expense: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to save expense")


@router.get("/", response_model=List[ExpensePublic])
def list_recent_expenses(
    limit: int = Query(settings.RECENT_EXPENSES_LIMIT, ge=1, le=500),
    user_id: str = Depends(get_current_user_id),
    source: RecordSource = Depends(get_record_source),
):
    """Most recent expenses first, each with its category."""
    try:
        categories = source.get_categories(user_id)
        records = source.get_recent_expenses(user_id, limit)
    except UpstreamQueryFailure as e:
        logger.error(f"Error fetching expenses: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch expenses")
    return [ExpensePublic.from_record(record, categories.get(record.category_id)) for record in records]


@router.get("/monthly/{month}", response_model=List[ExpensePublic])
def list_monthly_expenses(
    month: str,
    user_id: str = Depends(get_current_user_id),
    source: RecordSource = Depends(get_record_source),
):
    """
    month must follow YYYY-MM format. Example: 2025-11
    """
    match = MONTH_PATTERN.match(month)
    if not match:
        raise HTTPException(status_code=400, detail="Month must follow YYYY-MM format")
    try:
        window = month_window(int(match.group(1)), int(match.group(2)))
    except InvalidParameter as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        categories = source.get_categories(user_id)
        records = source.get_expenses(user_id, window)
    except UpstreamQueryFailure as e:
        logger.error(f"Error fetching expenses for {month}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch expenses")

    records = sorted(records, key=lambda record: record.date, reverse=True)
    return [ExpensePublic.from_record(record, categories.get(record.category_id)) for record in records]
