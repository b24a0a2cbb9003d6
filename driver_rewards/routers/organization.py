# driver_rewards/routers/organization.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.dependencies import get_db
from driver_rewards.schemas.organization import (
    MemberCount,
    Organization,
    OrganizationCreate,
    OrganizationCreated,
    OrganizationFieldUpdate,
    OrganizationList,
    OrganizationMembers,
)
from driver_rewards.services import organization as organization_service

router = APIRouter()


@router.post("", response_model=OrganizationCreated, status_code=status.HTTP_201_CREATED)
def create_organization(payload: OrganizationCreate, db: Session = Depends(get_db)):
    return organization_service.create_organization(db, payload)


@router.get("", response_model=OrganizationList)
def list_organizations(db: Session = Depends(get_db)):
    return OrganizationList(organizations=organization_service.list_organizations(db))


@router.get("/{org_id}", response_model=Organization)
def get_organization(org_id: int, db: Session = Depends(get_db)):
    return organization_service.get_organization(db, org_id)


@router.put("/{org_id}")
def update_organization(org_id: int, payload: OrganizationFieldUpdate, db: Session = Depends(get_db)):
    """Updates one field (`name` or `point_value`)."""
    org = organization_service.update_organization_field(db, org_id, payload.field, payload.value)
    return {"message": locales.SUCCESS_ORGANIZATION_UPDATED, "organization": Organization.model_validate(org).model_dump(mode="json")}


@router.delete("/{org_id}")
def delete_organization(org_id: int, db: Session = Depends(get_db)):
    organization_service.delete_organization(db, org_id)
    return {"message": locales.SUCCESS_ORGANIZATION_DELETED}


@router.get("/{org_id}/count", response_model=MemberCount)
def get_member_count(org_id: int, db: Session = Depends(get_db)):
    return organization_service.get_member_count(db, org_id)


@router.get("/{org_id}/users", response_model=OrganizationMembers)
def get_members(org_id: int, db: Session = Depends(get_db)):
    return organization_service.get_members(db, org_id)
