"""
Main API router
"""
from fastapi import APIRouter

from tkms.api.v1 import (
    health,
    version,
    auth,
    attendance,
    time_entries,
    time_adjustments,
    absence,
    leave,
    schedules,
    users,
    system_settings,
    notifications,
    uploads,
    dashboard,
    audit_logs,
    debug,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(version.router, tags=["version"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(attendance.router, prefix="/attendance", tags=["attendance"])
api_router.include_router(time_entries.router, prefix="/time-entries", tags=["time-entries"])
api_router.include_router(time_adjustments.router, prefix="/time-adjustments", tags=["time-adjustments"])
api_router.include_router(absence.router, prefix="/absence", tags=["absence"])
api_router.include_router(leave.router, prefix="/leave", tags=["leave"])
api_router.include_router(schedules.router, prefix="/schedules", tags=["schedules"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(system_settings.router, prefix="/system-settings", tags=["system-settings"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(uploads.router, prefix="/uploads", tags=["uploads"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(audit_logs.router, prefix="/audit-logs", tags=["audit-logs"])
api_router.include_router(debug.router, prefix="/debug", tags=["debug"])
