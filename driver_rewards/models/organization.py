# driver_rewards/models/organization.py

from sqlalchemy import Column, DateTime, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from driver_rewards.db.session import Base


class SponsorOrganization(Base):
    __tablename__ = "sponsor_organizations"

    sponsor_org_id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)

    # Conversion rate: points per 1 USD of catalog price
    point_value = Column(Numeric(10, 4), nullable=False, default=100, server_default="100")

    # Organization limits. NULL means unbounded.
    point_upper_limit = Column(Integer, nullable=True)
    point_lower_limit = Column(Integer, nullable=True)
    monthly_point_limit = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    members = relationship("User", back_populates="organization")
    catalog_items = relationship("CatalogItem", back_populates="organization", cascade="all, delete-orphan")
