"""
Service-wide constants
"""

SERVICE_NAME = "office-presence-backend"

# Audit actions
AUDIT_LOGIN_SUCCESS = "AUTH_LOGIN_SUCCESS"
AUDIT_CHECK_IN = "ATTENDANCE_CHECK_IN"
AUDIT_CHECK_OUT = "ATTENDANCE_CHECK_OUT"
AUDIT_USER_CREATE = "USER_CREATE"
AUDIT_USER_UPDATE = "USER_UPDATE"
AUDIT_USER_DELETE = "USER_DELETE"

# Label used for users without a department in reports
NO_DEPARTMENT_LABEL = "Tidak Ada"
