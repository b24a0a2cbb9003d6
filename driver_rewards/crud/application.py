# driver_rewards/crud/application.py
from typing import List
from sqlalchemy.orm import Session

from driver_rewards.models.application import DriverApplication


def get_application(db: Session, application_id: int) -> DriverApplication | None:
    return db.query(DriverApplication).filter(DriverApplication.application_id == application_id).first()

def get_pending_application(db: Session, driver_user_id: int, sponsor_org_id: int) -> DriverApplication | None:
    return db.query(DriverApplication).filter_by(
        driver_user_id=driver_user_id, sponsor_org_id=sponsor_org_id, status="pending"
    ).first()

def create_application(db: Session, driver_user_id: int, sponsor_org_id: int) -> DriverApplication:
    application = DriverApplication(driver_user_id=driver_user_id, sponsor_org_id=sponsor_org_id, status="pending")
    db.add(application)
    db.commit()
    db.refresh(application)
    return application

def get_org_applications(db: Session, sponsor_org_id: int, status: str | None = None) -> List[DriverApplication]:
    query = db.query(DriverApplication).filter(DriverApplication.sponsor_org_id == sponsor_org_id)
    if status:
        query = query.filter(DriverApplication.status == status)
    return query.order_by(DriverApplication.created_at.desc(), DriverApplication.application_id.desc()).all()

def get_driver_applications(db: Session, driver_user_id: int, status: str | None = None) -> List[DriverApplication]:
    query = db.query(DriverApplication).filter(DriverApplication.driver_user_id == driver_user_id)
    if status:
        query = query.filter(DriverApplication.status == status)
    return query.order_by(DriverApplication.created_at.desc(), DriverApplication.application_id.desc()).all()

def withdraw_approved_applications(db: Session, driver_user_id: int, sponsor_org_id: int, reviewed_at) -> int:
    """Marks the driver's approved applications for the organization as 'withdrawn'."""
    return db.query(DriverApplication).filter_by(
        driver_user_id=driver_user_id, sponsor_org_id=sponsor_org_id, status="approved"
    ).update({"status": "withdrawn", "reviewed_at": reviewed_at}, synchronize_session=False)
