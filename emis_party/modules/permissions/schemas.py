from pydantic import Field
from typing import Optional
from datetime import datetime

from emis_party.core.schemas import CamelModel


class PermissionCreate(CamelModel):
    resource: str = Field(min_length=1, examples=["Party"])
    action: str = Field(min_length=1, examples=["create"])
    description: Optional[str] = None
    wildcard: Optional[str] = None


class PermissionUpdate(CamelModel):
    resource: Optional[str] = None
    action: Optional[str] = None
    description: Optional[str] = None
    wildcard: Optional[str] = None


class PermissionResponse(CamelModel):
    id: str
    resource: Optional[str] = None
    action: Optional[str] = None
    description: Optional[str] = None
    wildcard: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
