# driver_rewards/services/awards.py

import logging
from typing import List
from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.core.errors import LimitExceededError, NotFoundError, ValidationError
from driver_rewards.crud import organization as crud_organization
from driver_rewards.crud import user as crud_user
from driver_rewards.schemas.points import AwardRejection, AwardResult
from driver_rewards.services import ledger as ledger_service
from driver_rewards.services import limits as limits_service
from driver_rewards.services import organization as organization_service

logger = logging.getLogger(__name__)

AWARD_SOURCES = ("manual", "recurring")


def _validate_request(driver_ids: List[int], point_amount: int, reason: str, source: str) -> None:
    if not driver_ids:
        raise ValidationError(locales.ERROR_DRIVER_IDS_REQUIRED)
    if isinstance(point_amount, bool) or not isinstance(point_amount, int) or point_amount == 0:
        raise ValidationError(locales.ERROR_POINT_AMOUNT_INVALID)
    if not (reason or "").strip():
        raise ValidationError(locales.ERROR_REASON_REQUIRED)
    if source not in AWARD_SOURCES:
        raise ValidationError(locales.ERROR_SOURCE_INVALID.format(allowed=", ".join(AWARD_SOURCES)))


def award_points(
    db: Session,
    sponsor_user_id: int,
    driver_ids: List[int],
    point_amount: int,
    reason: str,
    source: str = "manual",
) -> AwardResult:
    """
    Applies one signed adjustment to each listed driver of the sponsor's
    organization and reports the outcome per driver.

    Every driver is checked before its row is written, so a driver that is
    rejected leaves nothing behind and does not affect the others. Rows of
    earlier drivers are flushed, so the monthly cap seen by later drivers of
    the same batch already includes them. The batch commits once at the end.
    """
    _validate_request(driver_ids, point_amount, reason, source)

    sponsor = organization_service.get_sponsor_user(db, sponsor_user_id)
    unique_ids = list(dict.fromkeys(driver_ids))
    applied: List[int] = []
    rejected: List[AwardRejection] = []

    try:
        # Lock order: organization first, then drivers by ascending id
        org = crud_organization.lock_organization(db, sponsor.sponsor_org_id)
        if not org:
            raise NotFoundError(locales.ERROR_SPONSOR_ORG_NOT_FOUND)
        drivers = {driver.user_id: driver for driver in crud_user.lock_users(db, unique_ids)}

        for driver_id in unique_ids:
            driver = drivers.get(driver_id)
            if driver is None or not driver.is_driver:
                rejected.append(AwardRejection(
                    id=driver_id, kind="not_found", reason="not_found", message=locales.ERROR_USER_NOT_FOUND
                ))
                continue
            if driver.sponsor_org_id != org.sponsor_org_id or driver.driver_status != "active":
                rejected.append(AwardRejection(
                    id=driver_id, kind="membership", reason="forbidden",
                    message=locales.ERROR_DRIVER_NOT_IN_ORGANIZATION,
                ))
                continue

            check = limits_service.check_limits(db, org, driver_id, point_amount)
            if not check.allowed:
                rejected.append(AwardRejection(
                    id=driver_id,
                    kind=check.violation,
                    reason=LimitExceededError(check.violation, check.detail).reason,
                    message=check.detail,
                ))
                continue

            ledger_service.append_transaction(
                db,
                driver_user_id=driver_id,
                sponsor_org_id=org.sponsor_org_id,
                point_amount=point_amount,
                source=source,
                reason=reason,
                created_by_user_id=sponsor_user_id,
            )
            applied.append(driver_id)

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"Sponsor {sponsor_user_id} submitted {point_amount:+d} points for {len(unique_ids)} driver(s) "
        f"in org {sponsor.sponsor_org_id}: applied={applied}, rejected={[r.id for r in rejected]}"
    )
    for rejection in rejected:
        logger.info(f"Award for driver {rejection.id} rejected ({rejection.reason}): {rejection.message}")

    return AwardResult(applied=applied, rejected=rejected)
