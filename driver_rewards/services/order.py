# driver_rewards/services/order.py

import logging
from decimal import Decimal
from typing import List
from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.core.errors import InsufficientPointsError, NoActiveCartError, NotFoundError, ValidationError
from driver_rewards.crud import cart as crud_cart
from driver_rewards.crud import order as crud_order
from driver_rewards.models.order import Order, OrderItem
from driver_rewards.schemas.order import Order as OrderSchema, OrderCreated, OrderItem as OrderItemSchema
from driver_rewards.services import ledger as ledger_service

logger = logging.getLogger(__name__)


def checkout(db: Session, driver_user_id: int, sponsor_org_id: int, cart_id: int) -> OrderCreated:
    """
    Turns the driver's cart into an order in one unit of work:
    lock driver, validate cart, compare total with balance, write the order,
    its items and a single negative ledger row, drop the cart, commit.
    Any failure rolls everything back.
    """
    try:
        # Step 1: serialize with every other balance change of this driver
        driver = ledger_service.lock_driver(db, driver_user_id)

        # Step 2: the cart must be this driver's cart for the organization the driver is active in
        cart = crud_cart.get_cart(db, cart_id)
        if not cart or cart.driver_user_id != driver_user_id or cart.sponsor_org_id != sponsor_org_id:
            raise NoActiveCartError(locales.ERROR_NO_ACTIVE_CART)
        if driver.sponsor_org_id != cart.sponsor_org_id or driver.driver_status != "active":
            raise NoActiveCartError(locales.ERROR_NO_ACTIVE_CART)
        if not cart.items:
            raise ValidationError(locales.ERROR_CART_EMPTY)

        # Step 3: totals come from the prices captured when items were added
        total_points = sum(ci.points_price_at_add * ci.quantity for ci in cart.items)
        total_usd = sum((Decimal(ci.item.last_price_value) * ci.quantity for ci in cart.items), Decimal("0"))

        # Step 4
        balance = ledger_service.get_balance(db, driver_user_id)
        if total_points > balance:
            raise InsufficientPointsError(required=total_points, balance=balance)

        # Step 5
        order = Order(
            driver_user_id=driver_user_id,
            sponsor_org_id=sponsor_org_id,
            status="placed",
            total_points=total_points,
            total_usd=total_usd,
        )
        for cart_item in cart.items:
            order.items.append(OrderItem(
                item_id=cart_item.item_id,
                title=cart_item.item.title,
                image_url=cart_item.item.image_url,
                points_price_at_purchase=cart_item.points_price_at_add,
                price_usd_at_purchase=cart_item.item.last_price_value,
                quantity=cart_item.quantity,
            ))
        db.add(order)
        db.flush()

        ledger_service.append_transaction(
            db,
            driver_user_id=driver_user_id,
            sponsor_org_id=sponsor_org_id,
            point_amount=-total_points,
            source="order",
            reason=f"Order #{order.order_id}",
            created_by_user_id=driver_user_id,
        )
        crud_cart.delete_cart(db, cart)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"Driver {driver_user_id} placed order {order.order_id} in org {sponsor_org_id} "
        f"for {total_points} points (balance {balance} -> {balance - total_points})"
    )
    return OrderCreated(order_id=order.order_id, points_spent=total_points, remaining_balance=balance - total_points)


def get_driver_orders(db: Session, driver_user_id: int) -> List[OrderSchema]:
    return [OrderSchema.model_validate(order) for order in crud_order.get_driver_orders(db, driver_user_id)]


def get_org_orders(db: Session, sponsor_org_id: int) -> List[OrderSchema]:
    orders = []
    for order, username in crud_order.get_org_orders(db, sponsor_org_id):
        schema = OrderSchema.model_validate(order)
        schema.driver_username = username
        orders.append(schema)
    return orders


def get_order_items(db: Session, order_id: int) -> List[OrderItemSchema]:
    if not crud_order.get_order(db, order_id):
        raise NotFoundError(locales.ERROR_ORDER_NOT_FOUND)
    return [OrderItemSchema.model_validate(item) for item in crud_order.get_order_items(db, order_id)]
