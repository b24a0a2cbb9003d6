# driver_rewards/routers/contest.py

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.dependencies import get_db
from driver_rewards.schemas.points import ContestCreate, ContestReview, PointContest
from driver_rewards.services import contest as contest_service

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def submit_contest(payload: ContestCreate, db: Session = Depends(get_db)):
    contest = contest_service.submit_contest(db, payload)
    return {
        "message": locales.SUCCESS_CONTEST_SUBMITTED,
        "contest": PointContest.model_validate(contest).model_dump(mode="json"),
    }


@router.get("/organization/{org_id}", response_model=List[PointContest])
def list_org_contests(org_id: int, status: str | None = None, db: Session = Depends(get_db)):
    return contest_service.list_org_contests(db, org_id, status=status)


@router.put("/{contest_id}")
def review_contest(contest_id: int, payload: ContestReview, db: Session = Depends(get_db)):
    contest = contest_service.review_contest(
        db,
        contest_id,
        status=payload.status,
        reviewer_user_id=payload.reviewed_by_user_id,
        decision_reason=payload.decision_reason,
    )
    return {
        "message": locales.SUCCESS_CONTEST_REVIEWED.format(status=contest.status),
        "contest": PointContest.model_validate(contest).model_dump(mode="json"),
    }
