# driver_rewards/services/application.py

import logging
from datetime import datetime, timezone
from typing import List
from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from driver_rewards.crud import application as crud_application
from driver_rewards.crud import cart as crud_cart
from driver_rewards.crud import organization as crud_organization
from driver_rewards.crud import user as crud_user
from driver_rewards.models.application import DriverApplication
from driver_rewards.models.user import User

logger = logging.getLogger(__name__)

REVIEW_STATUSES = ("approved", "rejected")


def _get_driver(db: Session, driver_user_id: int, lock: bool = False) -> User:
    driver = crud_user.lock_user(db, driver_user_id) if lock else crud_user.get_user_by_id(db, driver_user_id)
    if not driver:
        raise NotFoundError(locales.ERROR_USER_NOT_FOUND)
    if not driver.is_driver:
        raise ForbiddenError(locales.ERROR_NOT_A_DRIVER)
    return driver


def submit_application(db: Session, driver_user_id: int, sponsor_org_id: int) -> DriverApplication:
    _get_driver(db, driver_user_id)
    if not crud_organization.get_organization(db, sponsor_org_id):
        raise NotFoundError(locales.ERROR_ORGANIZATION_NOT_FOUND)
    if crud_application.get_pending_application(db, driver_user_id, sponsor_org_id):
        raise ConflictError(locales.ERROR_APPLICATION_PENDING)

    application = crud_application.create_application(db, driver_user_id, sponsor_org_id)
    logger.info(f"Driver {driver_user_id} applied to org {sponsor_org_id} (application {application.application_id})")
    return application


def list_org_applications(db: Session, sponsor_org_id: int, status: str | None = None) -> List[DriverApplication]:
    return crud_application.get_org_applications(db, sponsor_org_id, status=status)


def list_driver_applications(db: Session, driver_user_id: int, status: str | None = None) -> List[DriverApplication]:
    return crud_application.get_driver_applications(db, driver_user_id, status=status)


def review_application(
    db: Session,
    application_id: int,
    status: str,
    reviewer_user_id: int,
    decision_reason: str | None = None,
) -> DriverApplication:
    """Approving binds the driver to the organization as an active driver."""
    if status not in REVIEW_STATUSES:
        raise ValidationError(locales.ERROR_APPLICATION_REVIEW_STATUS)

    try:
        application = crud_application.get_application(db, application_id)
        if not application:
            raise NotFoundError(locales.ERROR_APPLICATION_NOT_FOUND)
        if application.status != "pending":
            raise ConflictError(locales.ERROR_APPLICATION_ALREADY_REVIEWED)

        application.status = status
        application.decision_reason = decision_reason
        application.reviewed_by_user_id = reviewer_user_id
        application.reviewed_at = datetime.now(timezone.utc)

        if status == "approved":
            driver = _get_driver(db, application.driver_user_id, lock=True)
            # A cart bound to the previous sponsor cannot be checked out any more
            cart = crud_cart.get_driver_cart(db, driver.user_id)
            if cart and cart.sponsor_org_id != application.sponsor_org_id:
                crud_cart.delete_cart(db, cart)
            driver.sponsor_org_id = application.sponsor_org_id
            driver.driver_status = "active"

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(application)
    logger.info(f"Application {application_id} {status} by user {reviewer_user_id}")
    return application


def leave_sponsor(db: Session, driver_user_id: int) -> None:
    """
    The driver stops being active for their sponsor. Their approved
    applications to it are withdrawn and their cart is discarded; the
    ledger is left as it is.
    """
    try:
        driver = _get_driver(db, driver_user_id, lock=True)
        if not driver.sponsor_org_id or driver.driver_status != "active":
            raise NotFoundError(locales.ERROR_NO_ACTIVE_SPONSOR)

        sponsor_org_id = driver.sponsor_org_id
        driver.driver_status = "dropped"
        withdrawn = crud_application.withdraw_approved_applications(
            db, driver_user_id, sponsor_org_id, reviewed_at=datetime.now(timezone.utc)
        )
        cart = crud_cart.get_driver_cart(db, driver_user_id)
        if cart:
            crud_cart.delete_cart(db, cart)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Driver {driver_user_id} left org {sponsor_org_id}; {withdrawn} application(s) withdrawn")
