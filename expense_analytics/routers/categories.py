from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from expense_analytics.core.errors import UpstreamQueryFailure
from expense_analytics.db.source import RecordSource, get_record_source
from expense_analytics.models.category import CategoryCreate, CategoryPublic, CategoryWithStats
from expense_analytics.routers.deps import get_current_user_id
from expense_analytics.utils.analyzer import SpendingAnalyzer, to_money

router = APIRouter()
logger = logging.getLogger(__name__)
analyzer = SpendingAnalyzer()


@router.post("/", response_model=CategoryPublic, status_code=status.HTTP_201_CREATED)
def create_category(
    category: CategoryCreate,
    user_id: str = Depends(get_current_user_id),
    source: RecordSource = Depends(get_record_source),
):
    try:
        created = source.put_category(user_id, category.to_category())
    except UpstreamQueryFailure as e:
        logger.error(f"Error creating category: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to create category")
    logger.info(f"Created category {created.id} for user {user_id}")
    return CategoryPublic.from_category(created)


@router.get("/", response_model=List[CategoryPublic])
def list_categories(
    user_id: str = Depends(get_current_user_id),
    source: RecordSource = Depends(get_record_source),
):
    try:
        categories = source.get_categories(user_id)
    except UpstreamQueryFailure as e:
        logger.error(f"Error fetching categories: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch categories")
    return [CategoryPublic.from_category(c) for c in sorted(categories.values(), key=lambda c: c.name)]


@router.get("/stats", response_model=List[CategoryWithStats])
def list_categories_with_stats(
    user_id: str = Depends(get_current_user_id),
    source: RecordSource = Depends(get_record_source),
):
    """Every category with its all-time expense count and total, including unused ones."""
    try:
        categories = source.get_categories(user_id)
        records = source.get_expenses(user_id)
    except UpstreamQueryFailure as e:
        logger.error(f"Error fetching category stats: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to fetch categories")

    stats = []
    for category in sorted(categories.values(), key=lambda c: c.name):
        totals = analyzer.totals(r for r in records if r.category_id == category.id)
        stats.append(
            CategoryWithStats(
                **category.to_dict(),
                expense_count=totals.count,
                total_amount=to_money(totals.total),
            )
        )
    return stats
