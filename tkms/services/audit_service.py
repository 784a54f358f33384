"""
Audit logging service
"""
import logging
import math
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Request
from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tkms.models.audit_log import AuditAction, AuditCategory, AuditLog, AuditStatus
from tkms.models.user import User
from tkms.utils.datetime_utils import local_day_bounds, now_utc
from tkms.utils.enums import enum_to_str
from tkms.utils.json_serializer import sanitize_for_json

logger = logging.getLogger(__name__)


def client_info(request: Optional[Request]) -> Tuple[Optional[str], Optional[str]]:
    """(ip address, user agent) of the caller; honours X-Forwarded-For"""
    if request is None:
        return None, None
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    else:
        ip = request.headers.get("x-real-ip") or (request.client.host if request.client else None)
    return ip, request.headers.get("user-agent")


def log_audit(
    db: Session,
    action: AuditAction,
    category: AuditCategory,
    description: str,
    user: Optional[User] = None,
    user_name: Optional[str] = None,
    user_role: Optional[str] = None,
    request: Optional[Request] = None,
    meta: Optional[Dict[str, Any]] = None,
    status: AuditStatus = AuditStatus.SUCCESS,
) -> Optional[AuditLog]:
    """
    Create an audit log entry

    Audit failures are logged and swallowed so the audited operation itself
    is never rolled back by them.

    Args:
        db: Database session
        action: Action performed (e.g. LOGIN, TIME_IN, SCHEDULE_CREATED)
        category: Audit category
        description: Human-readable summary
        user: Acting user, when known
        user_name: Display name when no user row exists (e.g. failed login)
        user_role: Role when no user row exists
        request: Incoming request, for IP address and user agent
        meta: Additional metadata as dictionary (optional)
        status: SUCCESS or FAILED

    Returns:
        Created AuditLog instance, or None if it could not be written
    """
    ip_address, user_agent = client_info(request)
    safe_meta = sanitize_for_json(meta) if meta is not None else None

    audit_log = AuditLog(
        user_id=user.id if user else None,
        user_name=user.full_name if user else (user_name or "Unknown"),
        user_role=user.role if user else (user_role or "unknown"),
        action=enum_to_str(action),
        category=enum_to_str(category),
        description=description,
        ip_address=ip_address,
        user_agent=user_agent,
        meta_json=safe_meta,
        status=enum_to_str(status),
        created_at=now_utc(),
    )
    try:
        db.add(audit_log)
        db.commit()
        db.refresh(audit_log)
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Failed to write audit log {enum_to_str(action)}: {e}")
        return None
    return audit_log


def query_audit_logs(
    db: Session,
    page: int = 1,
    limit: int = 50,
    category: Optional[str] = None,
    action: Optional[str] = None,
    user_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
) -> Tuple[List[AuditLog], int]:
    """
    Filtered, paginated audit logs, newest first

    end_date is inclusive of the whole day.

    Returns:
        (logs on the requested page, total matching count)
    """
    query = db.query(AuditLog)

    if category:
        query = query.filter(AuditLog.category == category)
    if action:
        query = query.filter(AuditLog.action == action)
    if user_id:
        query = query.filter(AuditLog.user_id == user_id)
    if start_date:
        query = query.filter(AuditLog.created_at >= local_day_bounds(start_date)[0])
    if end_date:
        query = query.filter(AuditLog.created_at < local_day_bounds(end_date)[1])
    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(
            or_(
                func.lower(AuditLog.user_name).like(pattern),
                func.lower(AuditLog.description).like(pattern),
                func.lower(AuditLog.action).like(pattern),
            )
        )

    total = query.count()
    logs = (
        query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return logs, total


def audit_log_stats(db: Session) -> Dict[str, Any]:
    """Counts by category, top 10 actions, and the 5 latest entries across all logs"""
    count = func.count(AuditLog.id)
    by_category = (
        db.query(AuditLog.category, count)
        .group_by(AuditLog.category)
        .order_by(count.desc())
        .all()
    )
    by_action = (
        db.query(AuditLog.action, count)
        .group_by(AuditLog.action)
        .order_by(count.desc())
        .limit(10)
        .all()
    )
    recent = (
        db.query(AuditLog)
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .limit(5)
        .all()
    )
    return {
        "by_category": [{"id": name, "count": n} for name, n in by_category],
        "by_action": [{"id": name, "count": n} for name, n in by_action],
        "recent_activity": recent,
    }


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
