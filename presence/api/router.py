"""
Main API router
"""
from fastapi import APIRouter

from presence.api.v1 import (
    health,
    version,
    auth,
    attendance,
    users,
    reports,
    webhook,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(version.router, tags=["version"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(attendance.router, prefix="/attendance", tags=["attendance"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(webhook.router, prefix="/webhook", tags=["webhook"])
