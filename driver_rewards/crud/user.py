# driver_rewards/crud/user.py
from typing import List
from sqlalchemy.orm import Session

from driver_rewards.models.user import User


def get_user_by_id(db: Session, user_id: int) -> User | None:
    """Looks a user up by primary key."""
    return db.query(User).filter(User.user_id == user_id).first()

def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()

def lock_user(db: Session, user_id: int) -> User | None:
    """
    SELECT ... FOR UPDATE on the user row. Every sequence that reads a
    driver's balance and then writes to the ledger holds this lock.
    """
    return db.query(User).filter(User.user_id == user_id).with_for_update().first()

def lock_users(db: Session, user_ids: List[int]) -> List[User]:
    """Locks several user rows in ascending id order."""
    return db.query(User).filter(
        User.user_id.in_(user_ids)
    ).order_by(User.user_id).with_for_update().all()

def create_user(
    db: Session,
    email: str,
    password_hash: str,
    user_type: str = "driver",
    username: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
    sponsor_org_id: int | None = None,
    driver_status: str | None = None,
) -> User:
    db_user = User(
        email=email,
        password_hash=password_hash,
        user_type=user_type,
        username=username,
        first_name=first_name,
        last_name=last_name,
        sponsor_org_id=sponsor_org_id,
        driver_status=driver_status,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

def get_org_members(db: Session, sponsor_org_id: int) -> List[User]:
    return db.query(User).filter(User.sponsor_org_id == sponsor_org_id).order_by(User.user_id).all()

def count_org_members(db: Session, sponsor_org_id: int) -> int:
    return db.query(User).filter(User.sponsor_org_id == sponsor_org_id).count()

def get_active_org_drivers(db: Session, sponsor_org_id: int) -> List[User]:
    return db.query(User).filter(
        User.sponsor_org_id == sponsor_org_id,
        User.user_type == "driver",
        User.driver_status == "active",
    ).order_by(User.user_id).all()
