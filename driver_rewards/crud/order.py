# driver_rewards/crud/order.py
from typing import List, Tuple
from sqlalchemy.orm import Session

from driver_rewards.models.order import Order, OrderItem
from driver_rewards.models.user import User


def get_order(db: Session, order_id: int) -> Order | None:
    return db.query(Order).filter(Order.order_id == order_id).first()

def get_driver_orders(db: Session, driver_user_id: int) -> List[Order]:
    return db.query(Order).filter(
        Order.driver_user_id == driver_user_id
    ).order_by(Order.created_at.desc(), Order.order_id.desc()).all()

def get_org_orders(db: Session, sponsor_org_id: int) -> List[Tuple[Order, str | None]]:
    """Organization orders (newest first) paired with the driver's username."""
    return db.query(Order, User.username).join(
        User, Order.driver_user_id == User.user_id
    ).filter(
        Order.sponsor_org_id == sponsor_org_id
    ).order_by(Order.created_at.desc(), Order.order_id.desc()).all()

def get_order_items(db: Session, order_id: int) -> List[OrderItem]:
    return db.query(OrderItem).filter(OrderItem.order_id == order_id).order_by(OrderItem.order_item_id).all()
