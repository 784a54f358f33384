"""
System settings service: the singleton settings row
"""
import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tkms.core.constants import SYSTEM_SETTINGS_ID
from tkms.models.audit_log import AuditAction, AuditCategory
from tkms.models.system_settings import SystemSettings
from tkms.models.user import User
from tkms.services.audit_service import log_audit
from tkms.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)


def get_or_create_settings(db: Session) -> SystemSettings:
    """
    Get the settings row, creating it with defaults on first use

    Args:
        db: Database session

    Returns:
        SystemSettings instance (id == SYSTEM_SETTINGS_ID)
    """
    settings_row = db.query(SystemSettings).filter(SystemSettings.id == SYSTEM_SETTINGS_ID).first()
    if settings_row:
        return settings_row

    now = now_utc()
    settings_row = SystemSettings(id=SYSTEM_SETTINGS_ID, created_at=now, updated_at=now)
    db.add(settings_row)
    try:
        db.commit()
    except IntegrityError:
        # Another request created it first
        db.rollback()
        return db.query(SystemSettings).filter(SystemSettings.id == SYSTEM_SETTINGS_ID).one()
    db.refresh(settings_row)
    logger.info("Created default system settings")
    return settings_row


def update_settings(
    db: Session,
    changes: Dict[str, Any],
    actor: User,
    request=None,
) -> SystemSettings:
    """
    Apply whitelisted setting changes

    Args:
        db: Database session
        changes: Field name -> new value (already validated)
        actor: Super-admin performing the update
        request: Incoming request for audit context

    Returns:
        Updated SystemSettings instance
    """
    settings_row = get_or_create_settings(db)

    applied = {}
    for key, value in changes.items():
        if hasattr(SystemSettings, key) and getattr(settings_row, key) != value:
            setattr(settings_row, key, value)
            applied[key] = value

    now = now_utc()
    settings_row.last_updated_by = actor.id
    settings_row.last_updated_at = now
    settings_row.updated_at = now
    db.commit()
    db.refresh(settings_row)

    log_audit(
        db=db,
        action=AuditAction.SETTINGS_UPDATED,
        category=AuditCategory.SYSTEM,
        description=f"{actor.full_name} updated system settings",
        user=actor,
        request=request,
        meta={"changes": applied},
    )
    return settings_row
