# driver_rewards/models/order.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from driver_rewards.db.session import Base


class Order(Base):
    __tablename__ = "orders"
    order_id = Column(Integer, primary_key=True, index=True)
    driver_user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    sponsor_org_id = Column(Integer, ForeignKey("sponsor_organizations.sponsor_org_id", ondelete="SET NULL"), nullable=True, index=True)

    # 'placed', 'cancelled'
    status = Column(String, nullable=False, default="placed", server_default="placed")
    total_points = Column(Integer, nullable=False)
    total_usd = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.order_item_id")
    driver = relationship("User")


class OrderItem(Base):
    """Purchase-time snapshot; survives removal of the catalog item."""
    __tablename__ = "order_items"
    order_item_id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.order_id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("catalog_items.item_id", ondelete="SET NULL"), nullable=True)
    title = Column(String, nullable=False)
    image_url = Column(String, nullable=True)
    points_price_at_purchase = Column(Integer, nullable=False)
    price_usd_at_purchase = Column(Numeric(10, 2), nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=1)

    order = relationship("Order", back_populates="items")
