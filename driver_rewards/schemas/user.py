# driver_rewards/schemas/user.py
from pydantic import BaseModel
from datetime import datetime


class LoginRequest(BaseModel):
    email: str
    password: str


class UserPublic(BaseModel):
    """A user as returned to the client. Never carries the password hash."""
    user_id: int
    email: str
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    user_type: str
    sponsor_org_id: int | None = None
    driver_status: str | None = None
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    message: str
    access_token: str
    token_type: str = "bearer"
    user: UserPublic


class SessionResponse(BaseModel):
    loggedIn: bool
    user: UserPublic


class UserLookup(BaseModel):
    user: UserPublic
