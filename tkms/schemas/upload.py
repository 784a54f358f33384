"""
Upload schemas
"""
from typing import Optional
from pydantic import Field
from tkms.schemas.common import CamelModel


class UploadRequest(CamelModel):
    filename: Optional[str] = Field(None, description="Original file name")
    data: Optional[str] = Field(None, description="Base64 data URL or raw base64")


class UploadResponse(CamelModel):
    success: bool = True
    url: str
    key: Optional[str] = None
    storage: str
