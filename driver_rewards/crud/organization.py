# driver_rewards/crud/organization.py
from decimal import Decimal
from typing import List
from sqlalchemy.orm import Session

from driver_rewards.models.organization import SponsorOrganization


def get_organization(db: Session, sponsor_org_id: int) -> SponsorOrganization | None:
    return db.query(SponsorOrganization).filter(SponsorOrganization.sponsor_org_id == sponsor_org_id).first()

def lock_organization(db: Session, sponsor_org_id: int) -> SponsorOrganization | None:
    """
    SELECT ... FOR UPDATE on the organization row. Serializes monthly-cap
    checks for the organization.
    """
    return db.query(SponsorOrganization).filter(
        SponsorOrganization.sponsor_org_id == sponsor_org_id
    ).with_for_update().first()

def get_organizations(db: Session) -> List[SponsorOrganization]:
    return db.query(SponsorOrganization).order_by(SponsorOrganization.sponsor_org_id).all()

def create_organization(db: Session, name: str, point_value: Decimal) -> SponsorOrganization:
    org = SponsorOrganization(name=name, point_value=point_value)
    db.add(org)
    db.commit()
    db.refresh(org)
    return org

def delete_organization(db: Session, sponsor_org_id: int) -> bool:
    org = get_organization(db, sponsor_org_id)
    if org:
        db.delete(org)
        db.commit()
        return True
    return False
