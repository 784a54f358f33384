"""
Audit log schemas
"""
from typing import Any, Dict, List, Optional
from pydantic import Field
from tkms.schemas.common import CamelModel, LocalDateTime, Pagination


class AuditLogOut(CamelModel):
    id: int
    user_id: Optional[int] = None
    user_name: str
    user_role: str
    action: str
    category: str
    description: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="meta_json")
    status: str
    created_at: LocalDateTime


class CountBucket(CamelModel):
    id: str = Field(..., serialization_alias="_id")
    count: int


class AuditLogStats(CamelModel):
    by_category: List[CountBucket]
    by_action: List[CountBucket]
    recent_activity: List[AuditLogOut]


class AuditLogListResponse(CamelModel):
    success: bool = True
    logs: List[AuditLogOut]
    pagination: Pagination
    stats: AuditLogStats
