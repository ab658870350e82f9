"""
Attendance endpoints.
Every authenticated user checks in/out for themselves; admins may list everyone's records.
The server clock (get_now) decides lateness, check-out opening and the work date.
"""
import logging
from datetime import date, datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from presence.core.config import settings
from presence.core.deps import get_db, get_current_user, get_now
from presence.models.attendance import AttendanceType
from presence.models.user import User
from presence.schemas.attendance import (
    AttendanceActionRequest,
    AttendanceHistoryResponse,
    AttendanceListResponse,
    AttendanceRecordOut,
    DayGroupOut,
    GeofenceCheckRequest,
    GeofenceCheckResponse,
    OfficeOut,
    PolicyOut,
    TodayStatusOut,
)
from presence.services import attendance_service as svc
from presence.services.geofence_service import Coordinate, evaluate_position, get_office_location

router = APIRouter()
_log = logging.getLogger(__name__)


@router.get("/policy", response_model=PolicyOut)
async def policy_endpoint(current_user: User = Depends(get_current_user)):
    """Office location, radius and time rules in effect."""
    office = get_office_location()
    return PolicyOut(
        timezone=settings.OFFICE_TZ,
        office=OfficeOut(
            latitude=office.coordinate.latitude,
            longitude=office.coordinate.longitude,
            radius_meters=office.radius_meters,
        ),
        check_in_cutoff=settings.CHECK_IN_CUTOFF,
        check_out_opens=settings.CHECK_OUT_OPENS,
        check_out_deadline=settings.CHECK_OUT_DEADLINE,
    )


@router.post("/geofence", response_model=GeofenceCheckResponse)
async def geofence_endpoint(
    body: GeofenceCheckRequest,
    current_user: User = Depends(get_current_user),
):
    """Distance from the office and whether the position would be admitted."""
    result = evaluate_position(Coordinate(body.latitude, body.longitude))
    return GeofenceCheckResponse(
        distance_meters=round(result.distance_meters, 2),
        within_radius=result.within_radius,
        radius_meters=result.office.radius_meters,
    )


def _record_action(action: AttendanceType, body: AttendanceActionRequest, db: Session, user: User, now: datetime):
    _log.debug("%s: user_id=%s lat=%s lng=%s", action.value, user.id, body.latitude, body.longitude)
    record = svc.record_attendance(
        db=db,
        user=user,
        action=action,
        latitude=body.latitude,
        longitude=body.longitude,
        now=now,
        photo_url=body.photo_url,
    )
    return AttendanceRecordOut.model_validate(record)


@router.post("/check-in", response_model=AttendanceRecordOut, status_code=201)
async def check_in_endpoint(
    body: AttendanceActionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(get_now),
):
    """
    Check in for today. 403 outside the office radius, 409 if already checked in.
    Check-ins after the cutoff succeed with is_late=true.
    """
    return _record_action(AttendanceType.CHECK_IN, body, db, current_user, now)


@router.post("/check-out", response_model=AttendanceRecordOut, status_code=201)
async def check_out_endpoint(
    body: AttendanceActionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(get_now),
):
    """
    Check out for today. 400 before check-in or before check-out opens,
    409 if already checked out.
    """
    return _record_action(AttendanceType.CHECK_OUT, body, db, current_user, now)


@router.get("/today", response_model=TodayStatusOut)
async def today_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(get_now),
):
    """Current user's state for today (local work date)."""
    today = svc.get_today_status(db, current_user.id, now)
    return TodayStatusOut(
        work_date=today["work_date"],
        state=today["state"],
        records=[AttendanceRecordOut.model_validate(r) for r in today["records"]],
        can_check_out=today["can_check_out"],
        is_past_check_out_deadline=today["is_past_check_out_deadline"],
    )


@router.get("/history", response_model=AttendanceHistoryResponse)
async def history_endpoint(
    from_date: Optional[date] = Query(None, alias="from", description="Start date (YYYY-MM-DD)"),
    to_date: Optional[date] = Query(None, alias="to", description="End date (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Own records grouped by local work date, newest day first."""
    records = svc.list_attendance(db, current_user, from_date, to_date, user_id=current_user.id)
    days = [
        DayGroupOut(work_date=day, records=[AttendanceRecordOut.model_validate(r) for r in items])
        for day, items in svc.group_by_day(records)
    ]
    return AttendanceHistoryResponse(days=days, total=len(records))


@router.get("", response_model=AttendanceListResponse)
async def list_endpoint(
    from_date: Optional[date] = Query(None, alias="from", description="Start date (YYYY-MM-DD)"),
    to_date: Optional[date] = Query(None, alias="to", description="End date (YYYY-MM-DD)"),
    user_id: Optional[int] = Query(None, description="Admin only: filter by user"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    List attendance records, newest first.
    Admins see all users (optionally one user); everyone else sees only their own.
    """
    records = svc.list_attendance(db, current_user, from_date, to_date, user_id=user_id)
    return AttendanceListResponse(
        items=[AttendanceRecordOut.model_validate(r) for r in records],
        total=len(records),
    )
