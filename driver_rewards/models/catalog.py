# driver_rewards/models/catalog.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import relationship
from sqlalchemy.schema import UniqueConstraint

from driver_rewards.db.session import Base


class CatalogItem(Base):
    """Sponsor-curated mirror of an eBay listing."""
    __tablename__ = "catalog_items"
    item_id = Column(Integer, primary_key=True, index=True)
    sponsor_org_id = Column(Integer, ForeignKey("sponsor_organizations.sponsor_org_id", ondelete="CASCADE"), nullable=False, index=True)
    ebay_item_id = Column(String, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    item_web_url = Column(String, nullable=True)

    # Last known price in USD
    last_price_value = Column(Numeric(10, 2), nullable=False)
    # Derived: round(last_price_value * organization.point_value)
    points_price = Column(Integer, nullable=False)

    # 'available', 'unavailable'
    availability_status = Column(String, nullable=False, default="available", server_default="available")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    organization = relationship("SponsorOrganization", back_populates="catalog_items")

    __table_args__ = (UniqueConstraint("sponsor_org_id", "ebay_item_id", name="_org_ebay_item_uc"),)
