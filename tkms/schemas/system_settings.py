"""
System settings schemas
"""
from typing import Optional
from pydantic import Field
from tkms.schemas.common import CamelModel, LocalDateTime


class SystemSettingsOut(CamelModel):
    enable_leave_credits_management: bool
    enable_file_leave_request: bool
    enable_verbal_agreements: bool
    allow_early_out: bool
    allow_half_day: bool
    allow_late_in: bool
    late_grace_minutes: int
    employee_id_prefix: str
    employee_id_uppercase: bool
    employee_id_padding: int
    employee_id_delimiter: str
    company_name: str
    logo_url: Optional[str] = None
    favicon_url: Optional[str] = None
    primary_color: Optional[str] = None
    accent_color: Optional[str] = None
    sidebar_bg: Optional[str] = None
    sidebar_text: Optional[str] = None
    sidebar_active_bg: Optional[str] = None
    sidebar_hover_bg: Optional[str] = None
    button_bg: Optional[str] = None
    button_text: Optional[str] = None
    header_bg: Optional[str] = None
    header_text: Optional[str] = None
    auth_card_bg: Optional[str] = None
    auth_backdrop_bg: Optional[str] = None
    card_bg: Optional[str] = None
    footer_text: Optional[str] = None
    last_updated_by: Optional[int] = None
    last_updated_at: Optional[LocalDateTime] = None


class SystemSettingsUpdate(CamelModel):
    """Whitelisted keys; anything else in the request body is ignored"""
    enable_leave_credits_management: Optional[bool] = None
    enable_file_leave_request: Optional[bool] = None
    enable_verbal_agreements: Optional[bool] = None
    allow_early_out: Optional[bool] = None
    allow_half_day: Optional[bool] = None
    allow_late_in: Optional[bool] = None
    late_grace_minutes: Optional[int] = Field(None, ge=0, le=240)
    employee_id_prefix: Optional[str] = Field(None, min_length=1, max_length=16)
    employee_id_uppercase: Optional[bool] = None
    employee_id_padding: Optional[int] = Field(None, ge=1, le=10)
    employee_id_delimiter: Optional[str] = Field(None, max_length=3)
    company_name: Optional[str] = Field(None, min_length=1)
    logo_url: Optional[str] = None
    favicon_url: Optional[str] = None
    primary_color: Optional[str] = None
    accent_color: Optional[str] = None
    sidebar_bg: Optional[str] = None
    sidebar_text: Optional[str] = None
    sidebar_active_bg: Optional[str] = None
    sidebar_hover_bg: Optional[str] = None
    button_bg: Optional[str] = None
    button_text: Optional[str] = None
    header_bg: Optional[str] = None
    header_text: Optional[str] = None
    auth_card_bg: Optional[str] = None
    auth_backdrop_bg: Optional[str] = None
    card_bg: Optional[str] = None
    footer_text: Optional[str] = None


class SystemSettingsResponse(CamelModel):
    success: bool = True
    settings: SystemSettingsOut
