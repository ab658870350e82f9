"""
Database models
"""
from presence.models.user import User, Role
from presence.models.attendance import AttendanceRecord, AttendanceType
from presence.models.audit_log import AuditLog

__all__ = [
    "User",
    "Role",
    "AttendanceRecord",
    "AttendanceType",
    "AuditLog",
]
