# driver_rewards/models/cart.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, func
from sqlalchemy.orm import relationship
from sqlalchemy.schema import UniqueConstraint

from driver_rewards.db.session import Base


class Cart(Base):
    __tablename__ = "carts"
    cart_id = Column(Integer, primary_key=True, index=True)
    # One live cart per driver
    driver_user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, unique=True)
    sponsor_org_id = Column(Integer, ForeignKey("sponsor_organizations.sponsor_org_id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    items = relationship("CartItem", back_populates="cart", cascade="all, delete-orphan", order_by="CartItem.cart_item_id")


class CartItem(Base):
    __tablename__ = "cart_items"
    cart_item_id = Column(Integer, primary_key=True, index=True)
    cart_id = Column(Integer, ForeignKey("carts.cart_id", ondelete="CASCADE"), nullable=False)
    item_id = Column(Integer, ForeignKey("catalog_items.item_id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    # Snapshot taken when the item was added; later repricing does not touch it
    points_price_at_add = Column(Integer, nullable=False)

    cart = relationship("Cart", back_populates="items")
    item = relationship("CatalogItem")

    __table_args__ = (UniqueConstraint("cart_id", "item_id", name="_cart_item_uc"),)
