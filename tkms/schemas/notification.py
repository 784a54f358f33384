"""
Notification schemas
"""
from typing import Any, Dict, List, Optional
from pydantic import Field
from tkms.schemas.common import CamelModel, LocalDateTime


class NotificationOut(CamelModel):
    id: int
    recipient_id: int
    actor_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    link: Optional[str] = None
    category: Optional[str] = None
    read: bool
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="meta_json")
    created_at: Optional[LocalDateTime] = None


class NotificationListResponse(CamelModel):
    success: bool = True
    notifications: List[NotificationOut]
    unread_count: int = 0
