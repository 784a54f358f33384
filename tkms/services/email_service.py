"""
Outgoing email over SMTP

Mail is best-effort: send_email never raises, it reports the outcome in an
EmailResult so callers can log it and carry on.
"""
import logging
import smtplib
from dataclasses import dataclass
from datetime import date
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from html import escape
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from tkms.core.config import settings
from tkms.core.constants import ADMIN_ROLES
from tkms.models.user import User
from tkms.utils.datetime_utils import now_utc, to_local

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "Email not configured"
SMTP_TIMEOUT_SECONDS = 20


@dataclass
class EmailResult:
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


def _open_connection() -> smtplib.SMTP:
    if settings.SMTP_SECURE or settings.SMTP_PORT == 465:
        return smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, timeout=SMTP_TIMEOUT_SECONDS)
    connection = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=SMTP_TIMEOUT_SECONDS)
    connection.starttls()
    return connection


def send_email(to: str, subject: str, html: str) -> EmailResult:
    """
    Send an HTML email

    Args:
        to: Recipient address
        subject: Subject line
        html: HTML body

    Returns:
        EmailResult; error is "Email not configured" when SMTP credentials are missing
    """
    if not settings.smtp_configured():
        logger.debug(f"Skipping email to {to}: {NOT_CONFIGURED}")
        return EmailResult(success=False, error=NOT_CONFIGURED)

    sender = settings.EMAIL_FROM or settings.SMTP_USER
    message = EmailMessage()
    message["From"] = formataddr((settings.APP_NAME, sender))
    message["To"] = to
    message["Subject"] = subject
    message["Message-ID"] = make_msgid(domain=sender.split("@")[-1])
    message.set_content("This message requires an HTML capable mail client.")
    message.add_alternative(html, subtype="html")

    try:
        with _open_connection() as connection:
            connection.login(settings.SMTP_USER, settings.SMTP_PASS)
            connection.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Email to {to} failed: {e}")
        return EmailResult(success=False, error=str(e))

    logger.info(f"Email sent to {to}: {subject}")
    return EmailResult(success=True, message_id=message["Message-ID"])


def send_email_to_many(recipients: Iterable[str], subject: str, html: str) -> List[EmailResult]:
    return [send_email(recipient, subject, html) for recipient in recipients]


def admin_emails(db: Session) -> List[str]:
    """Addresses of every active admin and super-admin"""
    rows = db.query(User.email).filter(User.role.in_(ADMIN_ROLES), User.is_active == True).all()  # noqa: E712
    return [row.email for row in rows]


# -- templates ----------------------------------------------------------

def format_mail_date(day: date) -> str:
    """date(2026, 2, 2) -> 'Feb 02, 2026'"""
    return day.strftime("%b %d, %Y")


def _layout(heading: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background: #0066ff; color: white; padding: 24px; text-align: center; border-radius: 10px 10px 0 0;">
      <h1 style="margin: 0; font-size: 22px;">{escape(heading)}</h1>
    </div>
    <div style="background: #f9fafb; padding: 24px; border-radius: 0 0 10px 10px;">
      {body}
    </div>
    <p style="text-align: center; color: #6b7280; font-size: 12px;">{escape(settings.APP_NAME)} Time Keeping Management System</p>
  </div>
</body>
</html>
"""


def _details(rows) -> str:
    lines = "".join(
        f"<p><strong>{escape(label)}:</strong> {escape(str(value))}</p>" for label, value in rows if value
    )
    return f'<div style="background: white; border-left: 4px solid #0066ff; padding: 12px 16px;">{lines}</div>'


def leave_request_email(employee_name: str, leave_type: str, start: date, end: date, reason: str) -> str:
    body = (
        "<p>A new leave request has been submitted and requires your approval.</p>"
        + _details([
            ("Employee", employee_name),
            ("Leave Type", leave_type.capitalize()),
            ("Start Date", format_mail_date(start)),
            ("End Date", format_mail_date(end)),
            ("Reason", reason),
        ])
        + f'<p style="text-align: center;"><a href="{escape(settings.APP_URL)}/admin/leaves">Review Request</a></p>'
    )
    return _layout("New Leave Request", body)


def leave_approved_email(employee_name: str, leave_type: str, start: date, end: date) -> str:
    body = (
        f"<p>Hello {escape(employee_name)},</p>"
        "<p>Your leave request has been approved by the administrator.</p>"
        + _details([
            ("Leave Type", leave_type.capitalize()),
            ("Start Date", format_mail_date(start)),
            ("End Date", format_mail_date(end)),
        ])
        + "<p>Enjoy your time off!</p>"
    )
    return _layout("Leave Request Approved", body)


def leave_rejected_email(
    employee_name: str,
    leave_type: str,
    start: date,
    end: date,
    admin_notes: Optional[str] = None,
) -> str:
    body = (
        f"<p>Hello {escape(employee_name)},</p>"
        "<p>Unfortunately, your leave request could not be approved at this time.</p>"
        + _details([
            ("Leave Type", leave_type.capitalize()),
            ("Start Date", format_mail_date(start)),
            ("End Date", format_mail_date(end)),
            ("Admin Notes", admin_notes),
        ])
        + "<p>Please contact HR if you have any questions.</p>"
    )
    return _layout("Leave Request Status", body)


def password_reset_email(name: str, token: str) -> str:
    link = f"{settings.APP_URL}/reset-password?token={token}"
    body = (
        f"<p>Hello {escape(name)},</p>"
        "<p>We received a request to reset your password. Use the link below to choose a new one.</p>"
        f'<p style="text-align: center;"><a href="{escape(link)}">Reset Password</a></p>'
        f"<p>The link expires in {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes. "
        "If you did not ask for a reset you can ignore this message.</p>"
    )
    return _layout("Password Reset", body)


def diagnostic_email() -> str:
    sent_at = to_local(now_utc()).strftime("%b %d, %Y %I:%M %p")
    return _layout("Test Email", f"<p>This is a test email from {escape(settings.APP_NAME)} at {sent_at}.</p>")
