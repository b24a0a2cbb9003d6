# driver_rewards/models/points.py
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from driver_rewards.db.session import Base

TRANSACTION_SOURCES = ("manual", "recurring", "order")
CONTEST_STATUSES = ("pending", "approved", "rejected")


class PointTransaction(Base):
    """Ledger row. Rows are only ever inserted; the balance is their sum."""
    __tablename__ = "point_transactions"
    transaction_id = Column(Integer, primary_key=True, index=True)
    driver_user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    sponsor_org_id = Column(Integer, ForeignKey("sponsor_organizations.sponsor_org_id", ondelete="SET NULL"), nullable=True, index=True)

    # Positive: award, negative: deduction
    point_amount = Column(Integer, nullable=False)

    # 'manual', 'recurring', 'order'
    source = Column(String, nullable=False)
    reason = Column(Text, nullable=True)

    created_by_user_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    organization = relationship("SponsorOrganization")

    __table_args__ = (CheckConstraint("point_amount <> 0", name="ck_point_transactions_nonzero"),)


class PointContest(Base):
    __tablename__ = "point_contests"
    contest_id = Column(Integer, primary_key=True, index=True)
    transaction_id = Column(Integer, ForeignKey("point_transactions.transaction_id"), nullable=False, index=True)
    driver_user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    sponsor_org_id = Column(Integer, ForeignKey("sponsor_organizations.sponsor_org_id", ondelete="CASCADE"), nullable=False, index=True)
    reason = Column(Text, nullable=False)

    # 'pending', 'approved', 'rejected'
    status = Column(String, nullable=False, default="pending", server_default="pending")
    decision_reason = Column(Text, nullable=True)
    reviewed_by_user_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    transaction = relationship("PointTransaction")
    driver = relationship("User", foreign_keys=[driver_user_id])
