# driver_rewards/routers/driver.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.dependencies import get_db
from driver_rewards.schemas.application import LeaveSponsorRequest
from driver_rewards.schemas.points import DriverPoints, LifetimePoints
from driver_rewards.services import application as application_service
from driver_rewards.services import ledger as ledger_service
from driver_rewards.services import reports as reports_service

router = APIRouter()


@router.get("/driver/points/{user_id}", response_model=DriverPoints)
def get_driver_points(user_id: int, db: Session = Depends(get_db)):
    """Balance and history of a driver, newest first."""
    return ledger_service.get_driver_points(db, user_id)


@router.get("/user/lifetime-points/{user_id}", response_model=LifetimePoints)
def get_lifetime_points(user_id: int, db: Session = Depends(get_db)):
    return reports_service.get_lifetime_points(db, user_id)


@router.post("/driver/leave-sponsor")
def leave_sponsor(payload: LeaveSponsorRequest, db: Session = Depends(get_db)):
    application_service.leave_sponsor(db, payload.driver_user_id)
    return {"message": locales.SUCCESS_LEFT_SPONSOR}
