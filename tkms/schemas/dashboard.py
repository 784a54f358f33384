"""
Dashboard schemas
"""
from tkms.schemas.common import CamelModel


class DashboardStats(CamelModel):
    total_employees: int
    present_today: int
    absent_today: int
    late_today: int
    on_leave_today: int


class DashboardStatsResponse(CamelModel):
    success: bool = True
    stats: DashboardStats
