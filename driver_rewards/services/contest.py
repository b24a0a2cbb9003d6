# driver_rewards/services/contest.py

import logging
from datetime import datetime, timezone
from typing import List
from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.core.errors import ConflictError, NotFoundError, ValidationError
from driver_rewards.crud import points as crud_points
from driver_rewards.models.points import PointContest
from driver_rewards.schemas.points import ContestCreate, PointContest as PointContestSchema
from driver_rewards.services import ledger as ledger_service

logger = logging.getLogger(__name__)

REVIEW_STATUSES = ("approved", "rejected")


def submit_contest(db: Session, payload: ContestCreate) -> PointContest:
    """A driver disputes one of their own deductions."""
    reason = (payload.reason or "").strip()
    if not reason:
        raise ValidationError(locales.ERROR_REASON_REQUIRED)

    transaction = crud_points.get_transaction(db, payload.transaction_id)
    if not transaction or transaction.driver_user_id != payload.driver_user_id or transaction.point_amount >= 0:
        raise NotFoundError(locales.ERROR_CONTEST_TRANSACTION_NOT_FOUND)
    if crud_points.get_pending_contest_for_transaction(db, transaction.transaction_id):
        raise ConflictError(locales.ERROR_CONTEST_PENDING)

    contest = crud_points.create_contest(
        db,
        transaction_id=transaction.transaction_id,
        driver_user_id=payload.driver_user_id,
        sponsor_org_id=transaction.sponsor_org_id or payload.sponsor_org_id,
        reason=reason,
    )
    db.commit()
    db.refresh(contest)
    logger.info(f"Driver {payload.driver_user_id} contested transaction {transaction.transaction_id} (contest {contest.contest_id})")
    return contest


def list_org_contests(db: Session, sponsor_org_id: int, status: str | None = None) -> List[PointContestSchema]:
    contests = []
    for contest in crud_points.get_org_contests(db, sponsor_org_id, status=status):
        schema = PointContestSchema.model_validate(contest)
        schema.point_amount = contest.transaction.point_amount
        schema.transaction_reason = contest.transaction.reason
        schema.source = contest.transaction.source
        schema.transaction_date = contest.transaction.created_at
        schema.driver_username = contest.driver.username if contest.driver else None
        contests.append(schema)
    return contests


def review_contest(
    db: Session,
    contest_id: int,
    status: str,
    reviewer_user_id: int,
    decision_reason: str | None = None,
) -> PointContest:
    """
    Closes a pending contest. Approval writes one reversing award of the
    contested amount; reversals are not subject to organization limits.
    """
    if status not in REVIEW_STATUSES:
        raise ValidationError(locales.ERROR_CONTEST_REVIEW_STATUS)

    try:
        contest = crud_points.get_pending_contest(db, contest_id)
        if not contest:
            raise NotFoundError(locales.ERROR_CONTEST_NOT_FOUND)

        if status == "approved":
            ledger_service.lock_driver(db, contest.driver_user_id)
            ledger_service.append_transaction(
                db,
                driver_user_id=contest.driver_user_id,
                sponsor_org_id=contest.sponsor_org_id,
                point_amount=abs(contest.transaction.point_amount),
                source="manual",
                reason=f"Contest #{contest.contest_id} approved: reversal of transaction #{contest.transaction_id}",
                created_by_user_id=reviewer_user_id,
            )

        contest.status = status
        contest.decision_reason = decision_reason
        contest.reviewed_by_user_id = reviewer_user_id
        contest.reviewed_at = datetime.now(timezone.utc)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(contest)
    logger.info(f"Contest {contest_id} {status} by user {reviewer_user_id}")
    return contest
