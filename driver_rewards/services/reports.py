# driver_rewards/services/reports.py

from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.core.errors import NotFoundError
from driver_rewards.crud import points as crud_points
from driver_rewards.crud import user as crud_user
from driver_rewards.schemas.points import LifetimePoints, MonthlyPoints
from driver_rewards.services import limits as limits_service
from driver_rewards.services import organization as organization_service


def get_monthly_points(db: Session, sponsor_user_id: int) -> MonthlyPoints:
    """Month-to-date sums of the rows this sponsor entered for their organization."""
    sponsor = organization_service.get_sponsor_user(db, sponsor_user_id)
    return limits_service.get_month_totals(db, sponsor.sponsor_org_id, created_by_user_id=sponsor_user_id)


def get_lifetime_points(db: Session, user_id: int) -> LifetimePoints:
    # Sum of the whole history, deductions included
    if not crud_user.get_user_by_id(db, user_id):
        raise NotFoundError(locales.ERROR_USER_NOT_FOUND)
    return LifetimePoints(lifetime_points=crud_points.get_balance(db, user_id))
