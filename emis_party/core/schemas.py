from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Generic, List, Optional, TypeVar
from datetime import datetime

T = TypeVar("T")


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire; either is accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        from_attributes=True,
    )


class ListResponse(CamelModel, Generic[T]):
    data: List[T]
    total: int
    size: int
    limit: int
    skip: int
    page: int
    pages: int
    last_modified: Optional[datetime] = None
