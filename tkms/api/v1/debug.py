"""
Operator diagnostics
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from tkms.core.config import settings
from tkms.core.deps import require_admin
from tkms.models.user import User
from tkms.schemas.email import EmailTestRequest, EmailTestResponse
from tkms.services.email_service import diagnostic_email, send_email

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/send-test-email", response_model=EmailTestResponse)
async def send_test_email(
    data: EmailTestRequest,
    current_user: User = Depends(require_admin)
):
    """Send a test email to check the SMTP settings (Admin-only)"""
    recipient = data.to or settings.SMTP_USER
    if not recipient:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No recipient provided")

    result = send_email(recipient, subject=f"{settings.APP_NAME} Test Email", html=diagnostic_email())
    if not result.success:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=result.error)
    logger.info(f"Test email sent to {recipient} by user {current_user.id}")
    return {"success": True, "message_id": result.message_id}
