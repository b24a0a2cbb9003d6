# driver_rewards/models/user.py

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from driver_rewards.db.session import Base

USER_TYPES = ("driver", "sponsor", "admin")
DRIVER_STATUSES = ("active", "dropped", "unaffiliated")


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, unique=True, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    password_hash = Column(String, nullable=False)

    # 'driver', 'sponsor' or 'admin'
    user_type = Column(String, nullable=False, default="driver", server_default="driver")

    # Sponsors: the organization they work for. Drivers: their current sponsor.
    sponsor_org_id = Column(Integer, ForeignKey("sponsor_organizations.sponsor_org_id", ondelete="SET NULL"), nullable=True, index=True)
    # Drivers only: 'active', 'dropped', 'unaffiliated'
    driver_status = Column(String, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False, server_default="true")
    failed_login_attempts = Column(Integer, default=0, nullable=False, server_default="0")
    lockout_until = Column(DateTime(timezone=True), nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    organization = relationship("SponsorOrganization", back_populates="members")

    @property
    def is_driver(self) -> bool:
        return self.user_type == "driver"

    @property
    def is_sponsor(self) -> bool:
        return self.user_type == "sponsor"
