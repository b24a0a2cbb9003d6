# driver_rewards/crud/points.py

from datetime import datetime
from typing import Dict, Iterable, List, Tuple
from sqlalchemy import case, func
from sqlalchemy.orm import Session

from driver_rewards.models.organization import SponsorOrganization
from driver_rewards.models.points import PointContest, PointTransaction

# --- Basic CRUD ---

def create_transaction(
    db: Session,
    driver_user_id: int,
    sponsor_org_id: int | None,
    point_amount: int,
    source: str,
    reason: str | None = None,
    created_by_user_id: int | None = None,
) -> PointTransaction:
    """
    Builds a ledger row and adds it to the session.
    The caller owns db.commit().
    """
    transaction = PointTransaction(
        driver_user_id=driver_user_id,
        sponsor_org_id=sponsor_org_id,
        point_amount=point_amount,
        source=source,
        reason=reason,
        created_by_user_id=created_by_user_id,
    )
    db.add(transaction)
    return transaction

def get_transaction(db: Session, transaction_id: int) -> PointTransaction | None:
    return db.query(PointTransaction).filter(PointTransaction.transaction_id == transaction_id).first()

def get_driver_transactions(db: Session, driver_user_id: int) -> List[Tuple[PointTransaction, str | None]]:
    """All of a driver's transactions (newest first) paired with the sponsor name."""
    return db.query(PointTransaction, SponsorOrganization.name).outerjoin(
        SponsorOrganization, PointTransaction.sponsor_org_id == SponsorOrganization.sponsor_org_id
    ).filter(
        PointTransaction.driver_user_id == driver_user_id
    ).order_by(PointTransaction.created_at.desc(), PointTransaction.transaction_id.desc()).all()

def count_driver_transactions(db: Session, driver_user_id: int) -> int:
    return db.query(PointTransaction).filter(PointTransaction.driver_user_id == driver_user_id).count()

# --- Aggregates ---

def get_balance(db: Session, driver_user_id: int) -> int:
    """Current balance: plain sum of ALL of the driver's transactions."""
    balance = db.query(func.sum(PointTransaction.point_amount)).filter(
        PointTransaction.driver_user_id == driver_user_id
    ).scalar()
    return int(balance or 0)

def get_balances(db: Session, driver_user_ids: Iterable[int]) -> Dict[int, int]:
    """Balances for several drivers in one grouped query. Drivers without rows get 0."""
    ids = list(driver_user_ids)
    if not ids:
        return {}
    rows = db.query(
        PointTransaction.driver_user_id, func.sum(PointTransaction.point_amount)
    ).filter(
        PointTransaction.driver_user_id.in_(ids)
    ).group_by(PointTransaction.driver_user_id).all()
    balances = {driver_id: 0 for driver_id in ids}
    balances.update({driver_id: int(total or 0) for driver_id, total in rows})
    return balances

def get_period_totals(
    db: Session,
    sponsor_org_id: int,
    since: datetime,
    created_by_user_id: int | None = None,
) -> Tuple[int, int]:
    """
    Returns (awarded, deducted) for an organization since the given moment:
    the sum of positive amounts and the sum of negative amounts, separately.
    """
    query = db.query(
        func.coalesce(func.sum(case((PointTransaction.point_amount > 0, PointTransaction.point_amount), else_=0)), 0),
        func.coalesce(func.sum(case((PointTransaction.point_amount < 0, PointTransaction.point_amount), else_=0)), 0),
    ).filter(
        PointTransaction.sponsor_org_id == sponsor_org_id,
        PointTransaction.created_at >= since,
    )
    if created_by_user_id is not None:
        query = query.filter(PointTransaction.created_by_user_id == created_by_user_id)
    awarded, deducted = query.one()
    return int(awarded or 0), int(deducted or 0)

# --- Contests ---

def create_contest(db: Session, transaction_id: int, driver_user_id: int, sponsor_org_id: int, reason: str) -> PointContest:
    contest = PointContest(
        transaction_id=transaction_id,
        driver_user_id=driver_user_id,
        sponsor_org_id=sponsor_org_id,
        reason=reason,
        status="pending",
    )
    db.add(contest)
    return contest

def get_pending_contest_for_transaction(db: Session, transaction_id: int) -> PointContest | None:
    return db.query(PointContest).filter_by(transaction_id=transaction_id, status="pending").first()

def get_pending_contest(db: Session, contest_id: int) -> PointContest | None:
    """Finds a contest that is still awaiting review and locks it."""
    return db.query(PointContest).filter_by(
        contest_id=contest_id, status="pending"
    ).with_for_update().first()

def get_org_contests(db: Session, sponsor_org_id: int, status: str | None = None) -> List[PointContest]:
    query = db.query(PointContest).filter(PointContest.sponsor_org_id == sponsor_org_id)
    if status:
        query = query.filter(PointContest.status == status)
    return query.order_by(PointContest.created_at.desc(), PointContest.contest_id.desc()).all()
