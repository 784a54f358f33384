"""
Audit log endpoints (admin)
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tkms.core.deps import get_db, require_admin
from tkms.models.user import User
from tkms.schemas.audit_log import AuditLogListResponse
from tkms.services.audit_service import audit_log_stats, query_audit_logs, total_pages

router = APIRouter()


@router.get("", response_model=AuditLogListResponse)
async def list_audit_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    category: Optional[str] = Query(None),
    action: Optional[str] = Query(None),
    user_id: Optional[int] = Query(None, alias="userId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """
    Filtered audit logs with pagination and summary stats (Admin-only)

    endDate includes the whole day; search matches user name, description
    and action case-insensitively.
    """
    logs, total = query_audit_logs(
        db,
        page=page,
        limit=limit,
        category=category,
        action=action,
        user_id=user_id,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )
    return {
        "success": True,
        "logs": logs,
        "pagination": {"page": page, "limit": limit, "total": total, "pages": total_pages(total, limit)},
        "stats": audit_log_stats(db),
    }
