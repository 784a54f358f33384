"""
File storage: S3 when configured, local upload directory otherwise
"""
import base64
import binascii
import logging
import re
from pathlib import Path
from typing import NamedTuple, Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import HTTPException, status

from tkms.core.config import settings

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w/+.-]+);base64,(?P<data>.*)$", re.DOTALL)
UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


class StoredFile(NamedTuple):
    url: str
    key: str
    storage: str  # "s3" or "local"


def sanitize_filename(filename: str) -> str:
    """Replace anything outside [a-zA-Z0-9._-] with '_'"""
    return UNSAFE_FILENAME_CHARS.sub("_", filename)


def decode_base64_payload(data: Optional[str]) -> Tuple[bytes, Optional[str]]:
    """
    Decode a base64 data URL or raw base64 string

    Returns:
        (content bytes, mime type from the data URL or None)

    Raises:
        HTTPException: 400 if the payload is empty or not valid base64
    """
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File data is required")

    mime = None
    match = DATA_URL_PATTERN.match(data.strip())
    if match:
        mime = match.group("mime")
        data = match.group("data")

    try:
        content = base64.b64decode(data.strip(), validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid base64 data")

    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File data is empty")
    return content, mime


def _s3_client():
    return boto3.client(
        "s3",
        region_name=settings.AWS_REGION,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
    )


def save_file(key: str, content: bytes, content_type: Optional[str] = None) -> StoredFile:
    """
    Store bytes under `key`

    Args:
        key: Storage key, e.g. 'attendance-photos/ibay-0001-time-in-20260105T000512123456Z.jpg'
        content: File bytes
        content_type: MIME type, if known

    Returns:
        StoredFile with a URL usable by clients
    """
    if settings.s3_configured():
        extra = {"ContentType": content_type} if content_type else {}
        try:
            _s3_client().put_object(
                Bucket=settings.AWS_S3_BUCKET_NAME,
                Key=key,
                Body=content,
                **extra,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 upload failed for {key}: {e}")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Failed to upload file to storage"
            )
        url = f"https://{settings.AWS_S3_BUCKET_NAME}.s3.{settings.AWS_REGION}.amazonaws.com/{key}"
        logger.info(f"Uploaded {len(content)} bytes to s3://{settings.AWS_S3_BUCKET_NAME}/{key}")
        return StoredFile(url=url, key=key, storage="s3")

    root = Path(settings.UPLOAD_DIR).resolve()
    target = (root / key).resolve()
    if root not in target.parents:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid file name")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    logger.info(f"Stored {len(content)} bytes locally at {target}")
    return StoredFile(url=f"/uploads/{key}", key=key, storage="local")


def storage_status() -> dict:
    """Storage backend summary for the health endpoint"""
    if not settings.s3_configured():
        return {"backend": "local", "status": "ok", "uploadDir": settings.UPLOAD_DIR}
    try:
        _s3_client().head_bucket(Bucket=settings.AWS_S3_BUCKET_NAME)
        return {"backend": "s3", "status": "ok", "bucket": settings.AWS_S3_BUCKET_NAME}
    except (BotoCoreError, ClientError) as e:
        logger.warning(f"S3 health check failed: {e}")
        return {"backend": "s3", "status": "error", "bucket": settings.AWS_S3_BUCKET_NAME, "error": str(e)}
