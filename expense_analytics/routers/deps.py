from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from expense_analytics.db.source import RecordSource, get_record_source
from expense_analytics.utils.reports import ReportService


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """User id resolved by the upstream auth layer and forwarded as a header."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User id required")
    return x_user_id.strip()


def get_report_service(source: RecordSource = Depends(get_record_source)) -> ReportService:
    return ReportService(source)
