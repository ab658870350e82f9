"""
Attendance schemas. Datetimes are returned in the configured local zone (e.g. +07:00), never Z.
"""
from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer

from presence.models.attendance import AttendanceType
from presence.services.attendance_policy import DayState
from presence.utils.datetime_utils import iso_local


class AttendanceActionRequest(BaseModel):
    """Position captured by the device at the moment of check-in/check-out."""
    latitude: float = Field(..., ge=-90, le=90, description="GPS latitude")
    longitude: float = Field(..., ge=-180, le=180, description="GPS longitude")
    photo_url: Optional[str] = Field(None, description="Reference to an uploaded photo, stored as-is")


class GeofenceCheckRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class GeofenceCheckResponse(BaseModel):
    distance_meters: float
    within_radius: bool
    radius_meters: float


class AttendanceRecordOut(BaseModel):
    """Attendance record as exposed to clients."""
    id: int
    user_id: int
    type: AttendanceType
    timestamp: datetime
    work_date: date
    is_late: bool
    latitude: float
    longitude: float
    photo_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("timestamp", when_used="always")
    def _ser_timestamp(self, dt: datetime) -> str:
        return iso_local(dt)


class AttendanceListResponse(BaseModel):
    items: List[AttendanceRecordOut]
    total: int


class TodayStatusOut(BaseModel):
    """Current user's day: state machine position and today's records."""
    work_date: date
    state: DayState
    records: List[AttendanceRecordOut]
    can_check_out: bool
    is_past_check_out_deadline: bool

    model_config = ConfigDict(from_attributes=True)


class DayGroupOut(BaseModel):
    work_date: date
    records: List[AttendanceRecordOut]


class AttendanceHistoryResponse(BaseModel):
    days: List[DayGroupOut]
    total: int


class OfficeOut(BaseModel):
    latitude: float
    longitude: float
    radius_meters: float


class PolicyOut(BaseModel):
    """Rules the client needs to render the attendance card."""
    timezone: str
    office: OfficeOut
    check_in_cutoff: str
    check_out_opens: str
    check_out_deadline: str
