"""
Attendance policy engine: lateness classification, check-out window and the
per-user, per-day state machine

    NONE --check-in--> CHECKED_IN --check-out (>= opening time)--> CHECKED_OUT

CHECKED_OUT is terminal for the day. The engine is side-effect free: it
receives the clock value and the user's records explicitly and either returns
a draft record ready for persistence or raises a PolicyError.
"""
import enum
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from fastapi import status

from presence.models.attendance import AttendanceType
from presence.utils.datetime_utils import (
    ensure_utc,
    get_zone,
    local_at,
    local_date,
    parse_hhmm,
    to_local,
)


class DayState(str, enum.Enum):
    NONE = "NONE"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


class PolicyError(Exception):
    """An attendance action rejected by the day's state machine."""
    code = "POLICY_ERROR"
    message = "Attendance action not allowed"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class AlreadyCheckedIn(PolicyError):
    code = "ALREADY_CHECKED_IN"
    message = "Already checked in today"
    status_code = status.HTTP_409_CONFLICT


class AlreadyCheckedOut(PolicyError):
    code = "ALREADY_CHECKED_OUT"
    message = "Attendance already completed today"
    status_code = status.HTTP_409_CONFLICT


class CheckOutBeforeCheckIn(PolicyError):
    code = "CHECK_OUT_BEFORE_CHECK_IN"
    message = "You must check in before checking out"


class CheckOutTooEarly(PolicyError):
    code = "CHECK_OUT_TOO_EARLY"
    message = "Check-out is not open yet"


@dataclass(frozen=True)
class PolicyRules:
    tz: ZoneInfo = field(default_factory=lambda: ZoneInfo("Asia/Jakarta"))
    check_in_cutoff: time = time(7, 40)
    check_out_opens: time = time(16, 0)
    check_out_deadline: time = time(16, 10)

    @classmethod
    def from_settings(cls) -> "PolicyRules":
        from presence.core.config import settings
        return cls(
            tz=get_zone(settings.OFFICE_TZ),
            check_in_cutoff=parse_hhmm(settings.CHECK_IN_CUTOFF),
            check_out_opens=parse_hhmm(settings.CHECK_OUT_OPENS),
            check_out_deadline=parse_hhmm(settings.CHECK_OUT_DEADLINE),
        )


@dataclass(frozen=True)
class CheckInClassification:
    is_late: bool


@dataclass
class AttendanceDraft:
    """A record approved by the engine, not yet persisted."""
    user_id: int
    type: AttendanceType
    timestamp: datetime
    work_date: date
    is_late: bool
    latitude: float
    longitude: float
    photo_url: Optional[str] = None


def _rules(rules: Optional[PolicyRules]) -> PolicyRules:
    return rules or PolicyRules.from_settings()


def classify_check_in(now: datetime, rules: Optional[PolicyRules] = None) -> CheckInClassification:
    """Late iff now is strictly after the cutoff on now's local date (07:40:00 sharp is on time)."""
    rules = _rules(rules)
    local_now = to_local(now, rules.tz)
    cutoff = local_at(local_now.date(), rules.check_in_cutoff, rules.tz)
    return CheckInClassification(is_late=local_now > cutoff)


def can_check_out(now: datetime, rules: Optional[PolicyRules] = None) -> bool:
    """Check-out opens at the configured local time, inclusive."""
    rules = _rules(rules)
    return to_local(now, rules.tz).time() >= rules.check_out_opens


def is_past_check_out_deadline(now: datetime, rules: Optional[PolicyRules] = None) -> bool:
    """Whether the local time has reached the check-out deadline. Not used for gating."""
    rules = _rules(rules)
    return to_local(now, rules.tz).time() >= rules.check_out_deadline


def records_for_day(records: Iterable, day: date, rules: Optional[PolicyRules] = None) -> List:
    """Records whose timestamp falls on `day` in the local zone."""
    rules = _rules(rules)
    return [r for r in records if local_date(r.timestamp, rules.tz) == day]


def day_state(today_records: Iterable) -> DayState:
    kinds = {AttendanceType(r.type) for r in today_records}
    if AttendanceType.CHECK_OUT in kinds:
        return DayState.CHECKED_OUT
    if AttendanceType.CHECK_IN in kinds:
        return DayState.CHECKED_IN
    return DayState.NONE


def evaluate_action(
    today_records: Iterable,
    action: AttendanceType,
    now: datetime,
    *,
    user_id: int,
    latitude: float,
    longitude: float,
    photo_url: Optional[str] = None,
    rules: Optional[PolicyRules] = None,
) -> AttendanceDraft:
    """
    Decide whether `action` is allowed for the user's day and build the record.

    Args:
        today_records: the user's records (anything with .type and .timestamp);
            records not on now's local date are ignored
        action: check-in or check-out
        now: current instant (naive values are treated as UTC)

    Returns:
        AttendanceDraft with timestamp=now and is_late computed for check-ins

    Raises:
        AlreadyCheckedOut, AlreadyCheckedIn, CheckOutBeforeCheckIn, CheckOutTooEarly
    """
    rules = _rules(rules)
    action = AttendanceType(action)
    now = ensure_utc(now)
    today = local_date(now, rules.tz)

    state = day_state(records_for_day(today_records, today, rules))

    if state == DayState.CHECKED_OUT:
        raise AlreadyCheckedOut()

    if action == AttendanceType.CHECK_IN:
        if state == DayState.CHECKED_IN:
            raise AlreadyCheckedIn()
        is_late = classify_check_in(now, rules).is_late
    else:
        if state == DayState.NONE:
            raise CheckOutBeforeCheckIn()
        if not can_check_out(now, rules):
            opens = rules.check_out_opens.strftime("%H:%M")
            raise CheckOutTooEarly(f"Check-out is only allowed from {opens}")
        is_late = False

    return AttendanceDraft(
        user_id=user_id,
        type=action,
        timestamp=now,
        work_date=today,
        is_late=is_late,
        latitude=latitude,
        longitude=longitude,
        photo_url=photo_url,
    )
