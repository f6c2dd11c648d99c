from pydantic import Field
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from emis_party.core.schemas import CamelModel
from emis_party.modules.permissions.schemas import PermissionResponse


class RoleCreate(CamelModel):
    type: Optional[str] = None
    name: str = Field(min_length=1, examples=["Ward Officer"])
    description: Optional[str] = None
    permissions: Optional[List[UUID]] = Field(default=None, min_length=1)


class RoleUpdate(CamelModel):
    type: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    permissions: Optional[List[UUID]] = Field(default=None, min_length=1)


class RoleResponse(CamelModel):
    id: str
    type: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    permissions: Optional[List[PermissionResponse]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
