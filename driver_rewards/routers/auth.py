# driver_rewards/routers/auth.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from driver_rewards.dependencies import get_current_user, get_db
from driver_rewards.models.user import User
from driver_rewards.schemas.user import LoginRequest, LoginResponse, SessionResponse, UserPublic
from driver_rewards.services import auth as auth_service

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Email/password login. Returns a bearer token and the user."""
    return auth_service.login(db, credentials.email, credentials.password)


@router.get("/session", response_model=SessionResponse)
def get_session(current_user: User = Depends(get_current_user)):
    return SessionResponse(loggedIn=True, user=UserPublic.model_validate(current_user))
