# driver_rewards/schemas/application.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List
from datetime import datetime


class ApplicationCreate(BaseModel):
    user_id: int
    org_id: int


class ApplicationReview(BaseModel):
    status: str
    decision_reason: str | None = None
    user_id: int     # reviewer


class LeaveSponsorRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    driver_user_id: int = Field(alias="driverUserId")


class DriverApplication(BaseModel):
    application_id: int
    driver_user_id: int
    sponsor_org_id: int
    status: str
    decision_reason: str | None = None
    reviewed_by_user_id: int | None = None
    reviewed_at: datetime | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class ApplicationList(BaseModel):
    applications: List[DriverApplication]
