# driver_rewards/services/organization.py

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, List
from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.core.errors import NotFoundError, ValidationError
from driver_rewards.crud import organization as crud_organization
from driver_rewards.crud import points as crud_points
from driver_rewards.crud import user as crud_user
from driver_rewards.models.organization import SponsorOrganization
from driver_rewards.models.user import User
from driver_rewards.schemas.organization import (
    MemberCount,
    OrganizationCreate,
    OrganizationCreated,
    OrganizationMember,
    OrganizationMembers,
    SponsorDrivers,
)
from driver_rewards.schemas.points import OrganizationLimits, SponsorSettingsUpdate
from driver_rewards.services import catalog as catalog_service

logger = logging.getLogger(__name__)

# Columns that may be changed through the single-field update
EDITABLE_FIELDS = {"name", "point_value"}
LIMIT_FIELDS = ("point_upper_limit", "point_lower_limit", "monthly_point_limit")


def get_organization(db: Session, sponsor_org_id: int) -> SponsorOrganization:
    org = crud_organization.get_organization(db, sponsor_org_id)
    if not org:
        raise NotFoundError(locales.ERROR_ORGANIZATION_NOT_FOUND)
    return org


def list_organizations(db: Session) -> List[SponsorOrganization]:
    return crud_organization.get_organizations(db)


def create_organization(db: Session, payload: OrganizationCreate) -> OrganizationCreated:
    name = payload.name.strip()
    if not name:
        raise ValidationError("name is required.")
    org = crud_organization.create_organization(db, name=name, point_value=_parse_point_value(payload.point_value))
    logger.info(f"Created organization {org.sponsor_org_id} ('{org.name}')")
    return OrganizationCreated(message="Organization created successfully", organization_id=org.sponsor_org_id)


def delete_organization(db: Session, sponsor_org_id: int) -> None:
    if not crud_organization.delete_organization(db, sponsor_org_id):
        raise NotFoundError(locales.ERROR_ORGANIZATION_NOT_FOUND)
    logger.info(f"Deleted organization {sponsor_org_id}")


def _parse_point_value(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(locales.ERROR_POINT_VALUE_INVALID)
    try:
        point_value = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(locales.ERROR_POINT_VALUE_INVALID)
    if not point_value.is_finite() or point_value <= 0:
        raise ValidationError(locales.ERROR_POINT_VALUE_INVALID)
    return point_value


def update_organization_field(db: Session, sponsor_org_id: int, field: str, value: Any) -> SponsorOrganization:
    """
    Updates one whitelisted column. A new point_value reprices the mirrored
    catalog in the same commit; carts keep the prices they were filled at.
    """
    if field not in EDITABLE_FIELDS:
        raise ValidationError(locales.ERROR_FIELD_NOT_EDITABLE.format(field=field))

    try:
        org = crud_organization.lock_organization(db, sponsor_org_id)
        if not org:
            raise NotFoundError(locales.ERROR_ORGANIZATION_NOT_FOUND)

        if field == "name":
            name = str(value or "").strip()
            if not name:
                raise ValidationError("name is required.")
            org.name = name
        else:
            org.point_value = _parse_point_value(value)
            repriced = catalog_service.reprice_org_items(db, org)
            logger.info(f"Org {sponsor_org_id} point_value set to {org.point_value}; repriced {repriced} item(s)")

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(org)
    return org


# --- Members ---

def _to_member(user: User, balances: dict) -> OrganizationMember:
    return OrganizationMember(
        user_id=user.user_id,
        email=user.email,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        user_type=user.user_type,
        driver_status=user.driver_status,
        points=balances.get(user.user_id) if user.is_driver else None,
    )


def get_member_count(db: Session, sponsor_org_id: int) -> MemberCount:
    get_organization(db, sponsor_org_id)
    return MemberCount(count=crud_user.count_org_members(db, sponsor_org_id))


def get_members(db: Session, sponsor_org_id: int) -> OrganizationMembers:
    """All users attached to the organization; drivers carry their derived balance."""
    get_organization(db, sponsor_org_id)
    members = crud_user.get_org_members(db, sponsor_org_id)
    balances = crud_points.get_balances(db, [m.user_id for m in members if m.is_driver])
    return OrganizationMembers(users=[_to_member(m, balances) for m in members])


# --- Sponsor-facing views ---

def get_sponsor_user(db: Session, sponsor_user_id: int) -> User:
    """A sponsor (or admin) that belongs to an organization."""
    sponsor = crud_user.get_user_by_id(db, sponsor_user_id)
    if not sponsor or not (sponsor.is_sponsor or sponsor.user_type == "admin") or not sponsor.sponsor_org_id:
        raise NotFoundError(locales.ERROR_SPONSOR_ORG_NOT_FOUND)
    return sponsor


def get_sponsor_organization(db: Session, sponsor_user_id: int) -> SponsorOrganization:
    sponsor = get_sponsor_user(db, sponsor_user_id)
    org = crud_organization.get_organization(db, sponsor.sponsor_org_id)
    if not org:
        raise NotFoundError(locales.ERROR_SPONSOR_ORG_NOT_FOUND)
    return org


def get_sponsor_drivers(db: Session, sponsor_user_id: int) -> SponsorDrivers:
    org = get_sponsor_organization(db, sponsor_user_id)
    drivers = crud_user.get_active_org_drivers(db, org.sponsor_org_id)
    balances = crud_points.get_balances(db, [d.user_id for d in drivers])
    return SponsorDrivers(
        sponsor_org_id=org.sponsor_org_id,
        drivers=[_to_member(d, balances) for d in drivers],
    )


def get_sponsor_settings(db: Session, sponsor_user_id: int) -> OrganizationLimits:
    return OrganizationLimits.model_validate(get_sponsor_organization(db, sponsor_user_id))


def _parse_limit(field: str, value: Any) -> int | None:
    """Empty string or null clears the limit."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(locales.ERROR_LIMIT_NOT_INTEGER.format(field=field))
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text == "":
        return None
    try:
        return int(text)
    except ValueError:
        raise ValidationError(locales.ERROR_LIMIT_NOT_INTEGER.format(field=field))


def update_sponsor_settings(db: Session, payload: SponsorSettingsUpdate) -> OrganizationLimits:
    """
    Upserts the organization limits. Only fields present in the request are
    touched.
    """
    sponsor = get_sponsor_user(db, payload.sponsor_user_id)
    new_values = {
        field: _parse_limit(field, getattr(payload, field))
        for field in LIMIT_FIELDS
        if field in payload.model_fields_set
    }

    try:
        org = crud_organization.lock_organization(db, sponsor.sponsor_org_id)
        if not org:
            raise NotFoundError(locales.ERROR_SPONSOR_ORG_NOT_FOUND)

        upper = new_values.get("point_upper_limit", org.point_upper_limit)
        lower = new_values.get("point_lower_limit", org.point_lower_limit)
        if upper is not None and lower is not None and lower > upper:
            raise ValidationError(locales.ERROR_LIMITS_INVERTED)

        for field, value in new_values.items():
            setattr(org, field, value)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(org)
    logger.info(f"Sponsor {payload.sponsor_user_id} updated limits of org {org.sponsor_org_id}: {new_values}")
    return OrganizationLimits.model_validate(org)
