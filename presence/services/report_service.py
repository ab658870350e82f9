"""
Report service - admin dashboard aggregates for a local work date
"""
from datetime import date
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from presence.core.constants import NO_DEPARTMENT_LABEL
from presence.models.attendance import AttendanceRecord, AttendanceType
from presence.models.user import User, Role


def _percent(part: int, whole: int) -> int:
    return round(part * 100 / whole) if whole > 0 else 0


def _employees(db: Session) -> List[User]:
    return db.query(User).filter(User.role == Role.EMPLOYEE.value, User.active.is_(True)).all()


def get_daily_summary(db: Session, day: date) -> Dict:
    """
    Totals for one day.

    Present counts distinct employees with a check-in on `day`; late counts
    those check-ins flagged late. Only active employees are counted, so
    admin and inactive check-outs never show up in checked_out.
    """
    employees = _employees(db)
    employee_ids = {u.id for u in employees}

    check_ins = (
        db.query(AttendanceRecord)
        .filter(
            AttendanceRecord.work_date == day,
            AttendanceRecord.type == AttendanceType.CHECK_IN.value,
        )
        .all()
    )
    checked_out_ids = {
        user_id
        for (user_id,) in db.query(AttendanceRecord.user_id).filter(
            AttendanceRecord.work_date == day,
            AttendanceRecord.type == AttendanceType.CHECK_OUT.value,
        )
        if user_id in employee_ids
    }

    present_ids = {r.user_id for r in check_ins if r.user_id in employee_ids}
    late = sum(1 for r in check_ins if r.is_late and r.user_id in employee_ids)

    return {
        "work_date": day,
        "total_employees": len(employees),
        "present": len(present_ids),
        "late": late,
        "not_checked_in": len(employees) - len(present_ids),
        "checked_out": len(checked_out_ids),
        "attendance_rate": _percent(len(present_ids), len(employees)),
    }


def get_department_breakdown(db: Session, day: date) -> List[Dict]:
    """Per-department presence for `day`, ordered by department name."""
    present_ids = {
        user_id
        for (user_id,) in db.query(AttendanceRecord.user_id).filter(
            AttendanceRecord.work_date == day,
            AttendanceRecord.type == AttendanceType.CHECK_IN.value,
        )
    }

    departments: Dict[str, Dict[str, int]] = {}
    for user in _employees(db):
        bucket = departments.setdefault(user.department or NO_DEPARTMENT_LABEL, {"present": 0, "total": 0})
        bucket["total"] += 1
        if user.id in present_ids:
            bucket["present"] += 1

    return [
        {
            "department": name,
            "present": counts["present"],
            "total": counts["total"],
            "percentage": _percent(counts["present"], counts["total"]),
        }
        for name, counts in sorted(departments.items())
    ]


def get_check_ins_by_day(db: Session, until: date, days: int = 7) -> List[Dict]:
    """Check-in counts for the most recent `days` dates (on or before `until`) that have any."""
    rows = (
        db.query(AttendanceRecord.work_date, func.count(AttendanceRecord.id))
        .filter(
            AttendanceRecord.type == AttendanceType.CHECK_IN.value,
            AttendanceRecord.work_date <= until,
        )
        .group_by(AttendanceRecord.work_date)
        .order_by(AttendanceRecord.work_date.desc())
        .limit(days)
        .all()
    )
    return [{"work_date": d, "total": count} for d, count in reversed(rows)]
