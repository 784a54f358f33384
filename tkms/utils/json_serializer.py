"""
Make audit and notification metadata storable in JSON columns
"""
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel

from tkms.utils.datetime_utils import ensure_utc


def sanitize_for_json(value: Any) -> Any:
    """
    Recursively convert a metadata value into plain JSON types

    Datetimes are stored as UTC ISO strings, dates and times as ISO strings,
    enums as their value, Decimals as floats and pydantic models as their
    camelCase dump. Anything else falls back to str().
    """
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return ensure_utc(value).isoformat()
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {str(key): sanitize_for_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [sanitize_for_json(item) for item in value]
    if isinstance(value, BaseModel):
        return sanitize_for_json(value.model_dump(by_alias=True))
    return str(value)
