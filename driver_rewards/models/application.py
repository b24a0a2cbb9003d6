# driver_rewards/models/application.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from driver_rewards.db.session import Base

APPLICATION_STATUSES = ("pending", "approved", "rejected", "withdrawn")


class DriverApplication(Base):
    __tablename__ = "driver_applications"
    application_id = Column(Integer, primary_key=True, index=True)
    driver_user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    sponsor_org_id = Column(Integer, ForeignKey("sponsor_organizations.sponsor_org_id", ondelete="CASCADE"), nullable=False, index=True)

    # 'pending', 'approved', 'rejected', 'withdrawn'
    status = Column(String, nullable=False, default="pending", server_default="pending")
    decision_reason = Column(Text, nullable=True)
    reviewed_by_user_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    driver = relationship("User", foreign_keys=[driver_user_id])
