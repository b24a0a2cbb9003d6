# driver_rewards/routers/admin.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.dependencies import get_db
from driver_rewards.schemas.user import UserLookup, UserPublic
from driver_rewards.services import auth as auth_service

router = APIRouter()


@router.get("/user", response_model=UserLookup)
def find_user(email: str = Query(""), db: Session = Depends(get_db)):
    user = auth_service.get_user_by_email(db, email)
    return UserLookup(user=UserPublic.model_validate(user))


@router.delete("/user/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    """Soft delete: the account is deactivated, its history is kept."""
    auth_service.deactivate_user(db, user_id)
    return {"message": locales.SUCCESS_USER_DELETED}
