# driver_rewards/schemas/points.py
from pydantic import BaseModel, ConfigDict, Field, StrictInt
from datetime import datetime
from typing import List, Literal, Optional


class PointTransaction(BaseModel):
    transaction_id: int
    point_amount: int
    reason: str | None = None
    source: str
    created_at: datetime
    sponsor_org_id: int | None = None
    sponsor_name: str | None = None

    class Config:
        from_attributes = True


class DriverPoints(BaseModel):
    total_points: int
    transactions: List[PointTransaction]
    driver_status: str | None = None
    sponsor_name: str | None = None
    sponsor_org_id: int | None = None


class LifetimePoints(BaseModel):
    lifetime_points: int


# --- Awards ---

class AwardPointsRequest(BaseModel):
    """Body of POST /api/sponsor/points. Field names follow the front end (camelCase)."""
    model_config = ConfigDict(populate_by_name=True)

    sponsor_user_id: int = Field(alias="sponsorUserId")
    driver_ids: List[int] = Field(default_factory=list, alias="driverIds")
    point_amount: StrictInt = Field(0, alias="pointAmount")  # JSON integers only
    reason: str = ""
    source: str = "manual"


class AwardRejection(BaseModel):
    id: int
    kind: Literal["upper", "lower", "monthly", "membership", "not_found"]
    reason: str      # machine-readable, e.g. 'limit_exceeded:upper'
    message: str


class AwardResult(BaseModel):
    applied: List[int]
    rejected: List[AwardRejection]


class AwardPointsResponse(AwardResult):
    message: str


# --- Limits ---

class OrganizationLimits(BaseModel):
    point_upper_limit: int | None = None
    point_lower_limit: int | None = None
    monthly_point_limit: int | None = None

    class Config:
        from_attributes = True


class SponsorSettingsUpdate(BaseModel):
    """
    Upsert of the organization limits. An empty string or null clears a limit.
    """
    model_config = ConfigDict(populate_by_name=True)

    sponsor_user_id: int = Field(alias="sponsorUserId")
    point_upper_limit: Optional[int | str] = None
    point_lower_limit: Optional[int | str] = None
    monthly_point_limit: Optional[int | str] = None


class MonthlyPoints(BaseModel):
    month_awarded: int
    month_deducted: int


# --- Contests ---

class ContestCreate(BaseModel):
    transaction_id: int
    driver_user_id: int
    sponsor_org_id: int
    reason: str = ""


class ContestReview(BaseModel):
    status: str
    decision_reason: str | None = None
    reviewed_by_user_id: int


class PointContest(BaseModel):
    contest_id: int
    transaction_id: int
    driver_user_id: int
    sponsor_org_id: int
    reason: str
    status: str
    decision_reason: str | None = None
    reviewed_by_user_id: int | None = None
    reviewed_at: datetime | None = None
    created_at: datetime
    point_amount: int | None = None
    transaction_reason: str | None = None
    source: str | None = None
    transaction_date: datetime | None = None
    driver_username: str | None = None

    class Config:
        from_attributes = True


class LimitCheck(BaseModel):
    """Outcome of a pure limit check. `violation` is 'upper', 'lower' or 'monthly'."""
    allowed: bool
    violation: Literal["upper", "lower", "monthly"] | None = None
    detail: str | None = None
