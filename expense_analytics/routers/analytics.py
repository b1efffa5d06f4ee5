"""
Analytics Router
Serves the category, trend, monthly and summary dashboard reports
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from expense_analytics.core.errors import InvalidParameter, InvalidReportType
from expense_analytics.routers.deps import get_current_user_id, get_report_service
from expense_analytics.utils.reports import ReportService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/analytics")
async def get_analytics(
    type: Optional[str] = Query(None, description="categories | trends | monthly | summary"),
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    days: Optional[int] = Query(None),
    months: Optional[int] = Query(None),
    user_id: str = Depends(get_current_user_id),
    reports: ReportService = Depends(get_report_service),
):
    """
    Aggregated spending analytics for the current user.
    Lists are returned for categories, trends and monthly; summary is a single object.
    """
    try:
        return await reports.build(type, user_id, year=year, month=month, days=days, months=months)
    except InvalidReportType:
        logger.warning(f"Rejected analytics type {type!r} for user {user_id}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid analytics type")
    except InvalidParameter as e:
        logger.warning(f"Rejected analytics parameters for user {user_id}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error fetching analytics for user {user_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Could not load analytics")
