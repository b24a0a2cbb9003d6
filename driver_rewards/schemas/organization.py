# driver_rewards/schemas/organization.py
from pydantic import BaseModel, Field
from typing import Any, List
from datetime import datetime


class OrganizationCreate(BaseModel):
    name: str = Field(..., min_length=1)
    point_value: float = Field(100, gt=0)


class OrganizationFieldUpdate(BaseModel):
    """Single-field update, as sent by the editable fields on the organization page."""
    field: str
    value: Any


class Organization(BaseModel):
    sponsor_org_id: int
    name: str
    point_value: float
    point_upper_limit: int | None = None
    point_lower_limit: int | None = None
    monthly_point_limit: int | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class OrganizationCreated(BaseModel):
    message: str
    organization_id: int


class OrganizationList(BaseModel):
    message: str = "Organizations retrieved successfully"
    organizations: List[Organization]


class OrganizationMember(BaseModel):
    user_id: int
    email: str
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    user_type: str
    driver_status: str | None = None
    points: int | None = None    # drivers only


class OrganizationMembers(BaseModel):
    message: str = "Organization users retrieved successfully"
    users: List[OrganizationMember]


class MemberCount(BaseModel):
    message: str = "Organization member count retrieved successfully"
    count: int


class SponsorDrivers(BaseModel):
    sponsor_org_id: int
    drivers: List[OrganizationMember]
