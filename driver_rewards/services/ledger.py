# driver_rewards/services/ledger.py

import logging
from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.core.errors import ForbiddenError, NotFoundError, ValidationError
from driver_rewards.crud import points as crud_points
from driver_rewards.crud import user as crud_user
from driver_rewards.models.points import PointTransaction, TRANSACTION_SOURCES
from driver_rewards.models.user import User
from driver_rewards.schemas.points import DriverPoints, PointTransaction as PointTransactionSchema

logger = logging.getLogger(__name__)

# Sources that a sponsor enters by hand and that therefore need a reason
REASON_REQUIRED_SOURCES = {"manual", "recurring"}


def append_transaction(
    db: Session,
    driver_user_id: int,
    sponsor_org_id: int | None,
    point_amount: int,
    source: str,
    reason: str | None = None,
    created_by_user_id: int | None = None,
) -> PointTransaction:
    """
    The only way points enter or leave a balance. Validates the row, adds it
    to the session and flushes it so that balance and monthly sums computed
    later in the same unit of work already include it.
    Committing is up to the caller.
    """
    if isinstance(point_amount, bool) or not isinstance(point_amount, int) or point_amount == 0:
        raise ValidationError(locales.ERROR_POINT_AMOUNT_INVALID)
    if source not in TRANSACTION_SOURCES:
        raise ValidationError(locales.ERROR_SOURCE_INVALID.format(allowed=", ".join(TRANSACTION_SOURCES)))
    if source in REASON_REQUIRED_SOURCES and not (reason or "").strip():
        raise ValidationError(locales.ERROR_REASON_REQUIRED)

    transaction = crud_points.create_transaction(
        db,
        driver_user_id=driver_user_id,
        sponsor_org_id=sponsor_org_id,
        point_amount=point_amount,
        source=source,
        reason=reason.strip() if reason else reason,
        created_by_user_id=created_by_user_id,
    )
    db.flush()

    logger.info(
        f"Ledger row {transaction.transaction_id}: {point_amount:+d} points for driver {driver_user_id} "
        f"(org {sponsor_org_id}, source '{source}', by {created_by_user_id})"
    )
    return transaction


def get_balance(db: Session, driver_user_id: int) -> int:
    return crud_points.get_balance(db, driver_user_id)


def lock_driver(db: Session, driver_user_id: int) -> User:
    """
    Takes the row lock every balance-changing sequence runs under.
    Must be called inside the unit of work that will write the ledger row.
    """
    driver = crud_user.lock_user(db, driver_user_id)
    if not driver:
        raise NotFoundError(locales.ERROR_USER_NOT_FOUND)
    return driver


def get_driver_points(db: Session, driver_user_id: int) -> DriverPoints:
    """Balance plus the full history, newest first."""
    driver = crud_user.get_user_by_id(db, driver_user_id)
    if not driver:
        raise NotFoundError(locales.ERROR_USER_NOT_FOUND)
    if not driver.is_driver:
        raise ForbiddenError(locales.ERROR_NOT_A_DRIVER)

    rows = crud_points.get_driver_transactions(db, driver_user_id)
    transactions = [
        PointTransactionSchema(
            transaction_id=tx.transaction_id,
            point_amount=tx.point_amount,
            reason=tx.reason,
            source=tx.source,
            created_at=tx.created_at,
            sponsor_org_id=tx.sponsor_org_id,
            sponsor_name=sponsor_name,
        )
        for tx, sponsor_name in rows
    ]

    return DriverPoints(
        total_points=get_balance(db, driver_user_id),
        transactions=transactions,
        driver_status=driver.driver_status,
        sponsor_org_id=driver.sponsor_org_id,
        sponsor_name=driver.organization.name if driver.organization else None,
    )
