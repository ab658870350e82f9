"""
Attendance record model: one immutable row per successful check-in or check-out.
"""
from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, String, Boolean, Float, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship, backref
from sqlalchemy.sql import func
import enum
from presence.db.base import Base


class AttendanceType(str, enum.Enum):
    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"


class AttendanceRecord(Base):
    __tablename__ = "attendance_records"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=False)  # check-in / check-out
    timestamp = Column(DateTime(timezone=True), nullable=False)  # UTC instant of the action
    work_date = Column(Date, nullable=False, index=True)  # local calendar date of timestamp (settings.OFFICE_TZ)
    is_late = Column(Boolean, nullable=False, default=False)  # always False for check-out
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    photo_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "work_date", "type", name="uq_attendance_user_day_type"),
        CheckConstraint("type IN ('check-in', 'check-out')", name="ck_attendance_type"),
        CheckConstraint("type = 'check-in' OR NOT is_late", name="ck_attendance_late_check_in_only"),
    )

    user = relationship("User", backref=backref("attendance_records", cascade="all, delete-orphan"))
