from pydantic import BaseModel, EmailStr, Field, computed_field, field_validator
from typing import Literal, Optional, List
from uuid import UUID
from datetime import datetime

from emis_party.core.schemas import CamelModel
from emis_party.modules.roles.schemas import RoleResponse


class Point(BaseModel):
    """GeoJSON point; coordinates are [longitude, latitude]."""

    type: Literal["Point"] = "Point"
    coordinates: List[float] = Field(min_length=2, max_length=2)

    @field_validator("coordinates")
    @classmethod
    def check_bounds(cls, value: List[float]) -> List[float]:
        longitude, latitude = value
        if not -180 <= longitude <= 180:
            raise ValueError("longitude must be between -180 and 180")
        if not -90 <= latitude <= 90:
            raise ValueError("latitude must be between -90 and 90")
        return value


class PartyCreate(CamelModel):
    party: Optional[UUID] = None
    type: Optional[str] = None
    ownership: Optional[str] = None
    phases: Optional[List[str]] = None
    name: str = Field(min_length=1, examples=["Bedfordshire"])
    avatar: Optional[str] = None
    phone: str = Field(min_length=1, examples=["(943) 902-6124"])
    landline: Optional[str] = None
    fax: Optional[str] = None
    email: EmailStr = Field(examples=["arely.kuvalis@gmail.com"])
    website: Optional[str] = None
    about: Optional[str] = None
    physical_address: Optional[str] = None
    postal_address: Optional[str] = None
    locale: Optional[str] = None
    location: Optional[Point] = None
    roles: Optional[List[UUID]] = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class PartyUpdate(CamelModel):
    party: Optional[UUID] = None
    type: Optional[str] = None
    ownership: Optional[str] = None
    phases: Optional[List[str]] = None
    name: Optional[str] = None
    avatar: Optional[str] = None
    phone: Optional[str] = None
    landline: Optional[str] = None
    fax: Optional[str] = None
    email: Optional[EmailStr] = None
    website: Optional[str] = None
    about: Optional[str] = None
    physical_address: Optional[str] = None
    postal_address: Optional[str] = None
    locale: Optional[str] = None
    location: Optional[Point] = None
    roles: Optional[List[UUID]] = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value


class PartySummary(CamelModel):
    id: str
    type: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class PartyResponse(CamelModel):
    id: str
    party: Optional[PartySummary] = None
    type: Optional[str] = None
    ownership: Optional[str] = None
    phases: Optional[List[str]] = None
    name: Optional[str] = None
    avatar: Optional[str] = None
    phone: Optional[str] = None
    landline: Optional[str] = None
    fax: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    about: Optional[str] = None
    physical_address: Optional[str] = None
    postal_address: Optional[str] = None
    locale: Optional[str] = None
    location: Optional[Point] = None
    roles: Optional[List[RoleResponse]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def longitude(self) -> float:
        return self.location.coordinates[0] if self.location else 0

    @computed_field
    @property
    def latitude(self) -> float:
        return self.location.coordinates[1] if self.location else 0
