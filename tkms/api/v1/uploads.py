"""
File upload endpoint (admin branding assets)
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from tkms.core.config import settings
from tkms.core.deps import get_db, require_admin
from tkms.models.audit_log import AuditAction, AuditCategory
from tkms.models.user import User
from tkms.schemas.upload import UploadRequest, UploadResponse
from tkms.services.audit_service import log_audit
from tkms.services.storage_service import decode_base64_payload, sanitize_filename, save_file
from tkms.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=UploadResponse, status_code=201)
async def upload_file(
    data: UploadRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """
    Upload a base64 file (Admin-only)

    Stored in S3 under branding/<userId>/ when configured, otherwise in the
    local upload directory served at /uploads.
    """
    if not data.filename or not data.data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Filename and data are required")

    content, mime = decode_base64_payload(data.data)
    timestamp = int(now_utc().timestamp() * 1000)
    name = f"{timestamp}-{sanitize_filename(data.filename)}"
    key = f"branding/{current_user.id}/{name}" if settings.s3_configured() else name

    stored = save_file(key, content, mime)

    log_audit(
        db=db,
        action=AuditAction.FILE_UPLOADED,
        category=AuditCategory.SYSTEM,
        description=f"Uploaded {data.filename}",
        user=current_user,
        request=request,
        meta={"key": stored.key, "storage": stored.storage, "size": len(content)},
    )
    return {"success": True, "url": stored.url, "key": stored.key, "storage": stored.storage}
