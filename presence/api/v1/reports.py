"""
Admin reporting endpoints
"""
from datetime import date, datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from presence.core.deps import get_db, get_now, require_admin
from presence.models.user import User
from presence.schemas.report import (
    DailySummary,
    DayCount,
    DepartmentPresence,
    ReportSummaryResponse,
)
from presence.services import report_service
from presence.utils.datetime_utils import local_date

router = APIRouter()


@router.get("/summary", response_model=ReportSummaryResponse)
async def summary_endpoint(
    day: Optional[date] = Query(None, alias="date", description="Work date (YYYY-MM-DD); defaults to today"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
    now: datetime = Depends(get_now),
):
    """Dashboard totals, per-department presence and recent daily check-in counts."""
    day = day or local_date(now)
    return ReportSummaryResponse(
        summary=DailySummary(**report_service.get_daily_summary(db, day)),
        departments=[DepartmentPresence(**d) for d in report_service.get_department_breakdown(db, day)],
        check_ins_by_day=[DayCount(**c) for c in report_service.get_check_ins_by_day(db, day)],
    )
