"""
Email schemas
"""
from typing import Optional
from pydantic import Field
from tkms.schemas.common import CamelModel


class EmailTestRequest(CamelModel):
    to: Optional[str] = Field(None, description="Recipient; defaults to the SMTP user")


class EmailTestResponse(CamelModel):
    success: bool = True
    message_id: Optional[str] = None
