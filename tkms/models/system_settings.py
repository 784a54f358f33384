"""
System settings model: a single row with a fixed id
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from tkms.db.base import Base


class SystemSettings(Base):
    __tablename__ = "system_settings"

    id = Column(Integer, primary_key=True)

    # Feature flags
    enable_leave_credits_management = Column(Boolean, default=True, nullable=False)
    enable_file_leave_request = Column(Boolean, default=True, nullable=False)
    enable_verbal_agreements = Column(Boolean, default=True, nullable=False)
    allow_early_out = Column(Boolean, default=True, nullable=False)
    allow_half_day = Column(Boolean, default=True, nullable=False)
    allow_late_in = Column(Boolean, default=True, nullable=False)
    late_grace_minutes = Column(Integer, default=0, nullable=False)

    # Employee ID generation
    employee_id_prefix = Column(String, default="ibay", nullable=False)
    employee_id_uppercase = Column(Boolean, default=False, nullable=False)
    employee_id_padding = Column(Integer, default=4, nullable=False)
    employee_id_delimiter = Column(String, default="-", nullable=False)

    # Branding
    company_name = Column(String, default="IBAYTECH", nullable=False)
    logo_url = Column(String, default="/ibaytech-logo.png", nullable=True)
    favicon_url = Column(String, default="/favicon.ico", nullable=True)
    primary_color = Column(String, default="#2563eb", nullable=True)
    accent_color = Column(String, default="#7c3aed", nullable=True)
    sidebar_bg = Column(String, default="#0f1724", nullable=True)
    sidebar_text = Column(String, default="#e6eef8", nullable=True)
    sidebar_active_bg = Column(String, default="#2563eb", nullable=True)
    sidebar_hover_bg = Column(String, default="#0b1220", nullable=True)
    button_bg = Column(String, default="#7c3aed", nullable=True)
    button_text = Column(String, default="#ffffff", nullable=True)
    header_bg = Column(String, default="#ffffff", nullable=True)
    header_text = Column(String, default="#111827", nullable=True)
    auth_card_bg = Column(String, nullable=True)
    auth_backdrop_bg = Column(String, default="#ffffff", nullable=True)
    card_bg = Column(String, default="#ffffff", nullable=True)
    footer_text = Column(String, nullable=True)

    last_updated_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    last_updated_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)
