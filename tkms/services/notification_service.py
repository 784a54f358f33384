"""
In-app notification service
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from tkms.core.constants import ADMIN_ROLES, NOTIFICATION_LIST_LIMIT
from tkms.models.notification import Notification
from tkms.models.user import User
from tkms.utils.datetime_utils import now_utc
from tkms.utils.json_serializer import sanitize_for_json

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    recipient_id: int,
    title: str,
    description: Optional[str] = None,
    link: Optional[str] = None,
    category: Optional[str] = None,
    actor_id: Optional[int] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> Notification:
    """Create one notification and commit it"""
    now = now_utc()
    notification = Notification(
        recipient_id=recipient_id,
        actor_id=actor_id,
        title=title,
        description=description,
        link=link,
        category=category,
        read=False,
        meta_json=sanitize_for_json(meta) if meta is not None else None,
        created_at=now,
        updated_at=now,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def create_notification_for_users(
    db: Session,
    recipient_ids: Iterable[int],
    title: str,
    description: Optional[str] = None,
    link: Optional[str] = None,
    category: Optional[str] = None,
    actor_id: Optional[int] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> List[Notification]:
    """Fan one notification out to several recipients in a single commit"""
    now = now_utc()
    safe_meta = sanitize_for_json(meta) if meta is not None else None
    notifications = [
        Notification(
            recipient_id=recipient_id,
            actor_id=actor_id,
            title=title,
            description=description,
            link=link,
            category=category,
            read=False,
            meta_json=safe_meta,
            created_at=now,
            updated_at=now,
        )
        for recipient_id in set(recipient_ids)
    ]
    if not notifications:
        return []
    db.add_all(notifications)
    db.commit()
    return notifications


def notify_admins(
    db: Session,
    title: str,
    description: Optional[str] = None,
    link: Optional[str] = None,
    category: Optional[str] = None,
    actor_id: Optional[int] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> List[Notification]:
    """Notify every active admin and super-admin"""
    admin_ids = [
        row.id
        for row in db.query(User.id).filter(User.role.in_(ADMIN_ROLES), User.is_active == True).all()  # noqa: E712
    ]
    logger.debug(f"Notifying {len(admin_ids)} admins: {title}")
    return create_notification_for_users(
        db,
        admin_ids,
        title=title,
        description=description,
        link=link,
        category=category,
        actor_id=actor_id,
        meta=meta,
    )


def list_notifications_for_user(
    db: Session,
    user_id: int,
    limit: int = NOTIFICATION_LIST_LIMIT,
) -> List[Notification]:
    """Newest first"""
    return (
        db.query(Notification)
        .filter(Notification.recipient_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
        .all()
    )


def count_unread(db: Session, user_id: int) -> int:
    return (
        db.query(Notification)
        .filter(Notification.recipient_id == user_id, Notification.read == False)  # noqa: E712
        .count()
    )


def mark_all_as_read_for_user(db: Session, user_id: int) -> int:
    """
    Mark every unread notification of a user as read

    Returns:
        Number of notifications updated
    """
    updated = (
        db.query(Notification)
        .filter(Notification.recipient_id == user_id, Notification.read == False)  # noqa: E712
        .update({Notification.read: True, Notification.updated_at: now_utc()}, synchronize_session=False)
    )
    db.commit()
    return updated
