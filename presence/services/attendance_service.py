"""
Attendance service - check-in/check-out flow, today's status and listing.

Flow for an action: geofence admission -> policy evaluation against today's
records -> insert -> audit -> best-effort spreadsheet mirror. The policy check
is read-then-decide; the unique constraint (user_id, work_date, type) is the
authoritative guard and its violation is mapped back to the policy error.
"""
import logging
from collections import OrderedDict
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from presence.core.config import settings
from presence.core.constants import AUDIT_CHECK_IN, AUDIT_CHECK_OUT
from presence.models.attendance import AttendanceRecord, AttendanceType
from presence.models.user import User
from presence.services import sheets_service
from presence.services.attendance_policy import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    PolicyRules,
    can_check_out,
    day_state,
    evaluate_action,
    is_past_check_out_deadline,
)
from presence.services.audit_service import log_audit
from presence.services.geofence_service import Coordinate, evaluate_position
from presence.utils.datetime_utils import ZoneLike, ensure_utc, local_date

_log = logging.getLogger(__name__)


def get_today_records(
    db: Session,
    user_id: int,
    now: datetime,
    rules: Optional[PolicyRules] = None,
) -> List[AttendanceRecord]:
    """The user's records on now's local calendar date, oldest first."""
    rules = rules or PolicyRules.from_settings()
    today = local_date(now, rules.tz)
    return (
        db.query(AttendanceRecord)
        .filter(
            AttendanceRecord.user_id == user_id,
            AttendanceRecord.work_date == today,
        )
        .order_by(AttendanceRecord.timestamp.asc())
        .all()
    )


def _mirror_to_sheet(record: AttendanceRecord, user: User) -> None:
    if not settings.GOOGLE_SHEETS_ENABLED:
        return
    try:
        sheets_service.append_attendance_row(sheets_service.build_row(record, user))
    except Exception:
        # The record is already committed; the sheet is a secondary copy.
        _log.exception("Failed to write attendance record %s to Google Sheet", record.id)


def record_attendance(
    db: Session,
    user: User,
    action: AttendanceType,
    latitude: float,
    longitude: float,
    now: datetime,
    photo_url: Optional[str] = None,
) -> AttendanceRecord:
    """
    Check the user in or out at the given position.

    Raises:
        HTTPException: 403 when the position is outside the office radius
        PolicyError: when the day's state machine rejects the action
    """
    rules = PolicyRules.from_settings()
    action = AttendanceType(action)
    now = ensure_utc(now)

    geofence = evaluate_position(Coordinate(latitude, longitude))
    if not geofence.within_radius:
        _log.info(
            "Rejected %s for user_id=%s: %.1f m from office (radius %.0f m)",
            action.value, user.id, geofence.distance_meters, geofence.office.radius_meters,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=(
                f"You are outside the office radius: {geofence.distance_meters:.0f} m away, "
                f"maximum {geofence.office.radius_meters:.0f} m"
            ),
        )

    today_records = get_today_records(db, user.id, now, rules)
    draft = evaluate_action(
        today_records,
        action,
        now,
        user_id=user.id,
        latitude=latitude,
        longitude=longitude,
        photo_url=photo_url,
        rules=rules,
    )

    record = AttendanceRecord(
        user_id=draft.user_id,
        type=draft.type.value,
        timestamp=draft.timestamp,
        work_date=draft.work_date,
        is_late=draft.is_late,
        latitude=draft.latitude,
        longitude=draft.longitude,
        photo_url=draft.photo_url,
    )
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        _log.warning(
            "Concurrent duplicate %s for user_id=%s on %s", action.value, user.id, draft.work_date
        )
        if action == AttendanceType.CHECK_IN:
            raise AlreadyCheckedIn()
        raise AlreadyCheckedOut()
    db.refresh(record)

    log_audit(
        db=db,
        actor_id=user.id,
        action=AUDIT_CHECK_IN if action == AttendanceType.CHECK_IN else AUDIT_CHECK_OUT,
        entity_type="attendance_records",
        entity_id=record.id,
        meta={
            "work_date": draft.work_date,
            "timestamp": draft.timestamp,
            "is_late": draft.is_late,
            "lat": latitude,
            "lng": longitude,
            "distance_meters": round(geofence.distance_meters, 1),
        },
    )

    _mirror_to_sheet(record, user)
    return record


def get_today_status(db: Session, user_id: int, now: datetime) -> Dict:
    """State of the user's day plus whether check-out is currently open."""
    rules = PolicyRules.from_settings()
    records = get_today_records(db, user_id, now, rules)
    return {
        "work_date": local_date(now, rules.tz),
        "state": day_state(records),
        "records": records,
        "can_check_out": can_check_out(now, rules),
        "is_past_check_out_deadline": is_past_check_out_deadline(now, rules),
    }


def list_attendance(
    db: Session,
    current_user: User,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    user_id: Optional[int] = None,
) -> List[AttendanceRecord]:
    """
    List attendance records, newest first.

    Role-based scoping:
        - admin: all users, optionally narrowed to user_id
        - others: only their own records
    """
    if from_date and to_date and from_date > to_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="from must be less than or equal to to",
        )

    query = db.query(AttendanceRecord)
    if current_user.is_admin:
        if user_id is not None:
            query = query.filter(AttendanceRecord.user_id == user_id)
    else:
        if user_id is not None and user_id != current_user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied. You can only view your own attendance.",
            )
        query = query.filter(AttendanceRecord.user_id == current_user.id)

    if from_date:
        query = query.filter(AttendanceRecord.work_date >= from_date)
    if to_date:
        query = query.filter(AttendanceRecord.work_date <= to_date)

    return query.order_by(AttendanceRecord.timestamp.desc()).all()


def group_by_day(
    records: List[AttendanceRecord],
    tz: ZoneLike = None,
) -> List[Tuple[date, List[AttendanceRecord]]]:
    """Group records by the local date of their timestamp, keeping the input order within and across days."""
    grouped: "OrderedDict[date, List[AttendanceRecord]]" = OrderedDict()
    for record in records:
        grouped.setdefault(local_date(record.timestamp, tz), []).append(record)
    return list(grouped.items())
