# driver_rewards/routers/sponsor.py

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.dependencies import get_db
from driver_rewards.schemas.organization import SponsorDrivers
from driver_rewards.schemas.points import (
    AwardPointsRequest, AwardPointsResponse, MonthlyPoints, OrganizationLimits, SponsorSettingsUpdate
)
from driver_rewards.services import awards as awards_service
from driver_rewards.services import organization as organization_service
from driver_rewards.services import reports as reports_service

router = APIRouter()


@router.get("/drivers/{sponsor_user_id}", response_model=SponsorDrivers)
def get_sponsor_drivers(sponsor_user_id: int, db: Session = Depends(get_db)):
    """Active drivers of the sponsor's organization with their balances."""
    return organization_service.get_sponsor_drivers(db, sponsor_user_id)


@router.get("/settings/{sponsor_user_id}", response_model=OrganizationLimits)
def get_sponsor_settings(sponsor_user_id: int, db: Session = Depends(get_db)):
    return organization_service.get_sponsor_settings(db, sponsor_user_id)


@router.put("/settings")
def update_sponsor_settings(payload: SponsorSettingsUpdate, db: Session = Depends(get_db)):
    limits = organization_service.update_sponsor_settings(db, payload)
    return {"message": locales.SUCCESS_SETTINGS_SAVED, **limits.model_dump()}


@router.post("/points", response_model=AwardPointsResponse)
def award_points(payload: AwardPointsRequest, db: Session = Depends(get_db)):
    """
    Applies one adjustment to one or more drivers. Succeeds when at least one
    driver got the points; the response lists who was rejected and why.
    """
    result = awards_service.award_points(
        db,
        sponsor_user_id=payload.sponsor_user_id,
        driver_ids=payload.driver_ids,
        point_amount=payload.point_amount,
        reason=payload.reason,
        source=payload.source,
    )

    if not result.applied:
        single = result.rejected[0] if len(result.rejected) == 1 else None
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": single.message if single else locales.ERROR_NO_POINTS_APPLIED,
                "reason": single.reason if single else "no_points_applied",
                "applied": [],
                "rejected": [r.model_dump() for r in result.rejected],
            },
        )

    return AwardPointsResponse(
        message=locales.SUCCESS_POINTS_APPLIED.format(count=len(result.applied)),
        applied=result.applied,
        rejected=result.rejected,
    )


@router.get("/monthly-points/{sponsor_user_id}", response_model=MonthlyPoints)
def get_monthly_points(sponsor_user_id: int, db: Session = Depends(get_db)):
    return reports_service.get_monthly_points(db, sponsor_user_id)
