# driver_rewards/services/limits.py

import logging
from datetime import datetime, timezone
from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.core.errors import LimitExceededError
from driver_rewards.crud import points as crud_points
from driver_rewards.models.organization import SponsorOrganization
from driver_rewards.schemas.points import LimitCheck, MonthlyPoints

logger = logging.getLogger(__name__)


def month_start(now: datetime | None = None) -> datetime:
    """First day of the current calendar month, 00:00 UTC."""
    now = now or datetime.now(timezone.utc)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def get_month_totals(
    db: Session,
    sponsor_org_id: int,
    created_by_user_id: int | None = None,
    now: datetime | None = None,
) -> MonthlyPoints:
    """
    Month-to-date organization sums straight from the ledger. `month_awarded`
    only counts positive rows, `month_deducted` only negative ones.
    """
    awarded, deducted = crud_points.get_period_totals(
        db, sponsor_org_id, since=month_start(now), created_by_user_id=created_by_user_id
    )
    return MonthlyPoints(month_awarded=awarded, month_deducted=deducted)


def check_limits(
    db: Session,
    org: SponsorOrganization,
    driver_user_id: int,
    point_amount: int,
    now: datetime | None = None,
) -> LimitCheck:
    """
    Checks a proposed adjustment against the organization's bounds without
    writing anything. Bounds are inclusive; a NULL bound is not checked.
    The caller holds the organization and driver locks.
    """
    projected = crud_points.get_balance(db, driver_user_id) + point_amount

    if org.point_upper_limit is not None and projected > org.point_upper_limit:
        return LimitCheck(
            allowed=False,
            violation="upper",
            detail=locales.ERROR_UPPER_LIMIT.format(limit=org.point_upper_limit),
        )
    if org.point_lower_limit is not None and projected < org.point_lower_limit:
        return LimitCheck(
            allowed=False,
            violation="lower",
            detail=locales.ERROR_LOWER_LIMIT.format(limit=org.point_lower_limit),
        )

    # Only awards count against the monthly cap
    if org.monthly_point_limit is not None and point_amount > 0:
        totals = get_month_totals(db, org.sponsor_org_id, now=now)
        if totals.month_awarded + point_amount > org.monthly_point_limit:
            return LimitCheck(
                allowed=False,
                violation="monthly",
                detail=locales.ERROR_MONTHLY_LIMIT.format(
                    limit=org.monthly_point_limit, month_awarded=totals.month_awarded
                ),
            )

    return LimitCheck(allowed=True)


def enforce_limits(
    db: Session,
    org: SponsorOrganization,
    driver_user_id: int,
    point_amount: int,
    now: datetime | None = None,
) -> None:
    """Same as check_limits, but raises LimitExceededError on a violation."""
    check = check_limits(db, org, driver_user_id, point_amount, now=now)
    if not check.allowed:
        logger.info(
            f"Limit '{check.violation}' blocks {point_amount:+d} points for driver {driver_user_id} "
            f"in org {org.sponsor_org_id}"
        )
        raise LimitExceededError(check.violation, check.detail)
