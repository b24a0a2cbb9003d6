# driver_rewards/routers/application.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.dependencies import get_db
from driver_rewards.schemas.application import (
    ApplicationCreate, ApplicationList, ApplicationReview, DriverApplication
)
from driver_rewards.services import application as application_service

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def submit_application(payload: ApplicationCreate, db: Session = Depends(get_db)):
    application = application_service.submit_application(db, payload.user_id, payload.org_id)
    return {
        "message": locales.SUCCESS_APPLICATION_SUBMITTED,
        "application": DriverApplication.model_validate(application).model_dump(mode="json"),
    }


@router.get("/organization/{org_id}", response_model=ApplicationList)
def list_org_applications(org_id: int, status: str | None = None, db: Session = Depends(get_db)):
    return ApplicationList(applications=application_service.list_org_applications(db, org_id, status=status))


@router.get("/user/{user_id}", response_model=ApplicationList)
def list_driver_applications(user_id: int, status: str | None = None, db: Session = Depends(get_db)):
    return ApplicationList(applications=application_service.list_driver_applications(db, user_id, status=status))


@router.put("/{application_id}")
def review_application(application_id: int, payload: ApplicationReview, db: Session = Depends(get_db)):
    application = application_service.review_application(
        db,
        application_id,
        status=payload.status,
        reviewer_user_id=payload.user_id,
        decision_reason=payload.decision_reason,
    )
    return {
        "message": locales.SUCCESS_APPLICATION_UPDATED,
        "application": DriverApplication.model_validate(application).model_dump(mode="json"),
    }
