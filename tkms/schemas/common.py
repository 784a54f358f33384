"""
Shared schema building blocks
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

from tkms.utils.datetime_utils import iso_local


class CamelModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python, readable from ORM rows"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Datetimes leave the API in the business timezone with an explicit offset
LocalDateTime = Annotated[datetime, PlainSerializer(iso_local, return_type=str)]


class SuccessResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


JsonDict = Dict[str, Any]
JsonList = List[Any]
