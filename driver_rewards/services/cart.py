# driver_rewards/services/cart.py

import logging
from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.core.errors import ForbiddenError, NoActiveCartError, NotFoundError, ValidationError
from driver_rewards.crud import cart as crud_cart
from driver_rewards.crud import catalog as crud_catalog
from driver_rewards.crud import user as crud_user
from driver_rewards.models.cart import Cart, CartItem
from driver_rewards.schemas.cart import CartItemResponse, CartResponse

logger = logging.getLogger(__name__)


def get_or_create_cart(db: Session, driver_user_id: int) -> Cart:
    """
    Returns the driver's live cart, creating one bound to the driver's
    current sponsor when there is none. A cart left over from a previous
    sponsor is discarded.
    """
    driver = crud_user.get_user_by_id(db, driver_user_id)
    if not driver:
        raise NotFoundError(locales.ERROR_USER_NOT_FOUND)
    if not driver.is_driver:
        raise ForbiddenError(locales.ERROR_NOT_A_DRIVER)
    if not driver.sponsor_org_id or driver.driver_status != "active":
        raise ValidationError(locales.ERROR_DRIVER_HAS_NO_SPONSOR)

    cart = crud_cart.get_driver_cart(db, driver_user_id)
    if cart and cart.sponsor_org_id == driver.sponsor_org_id:
        return cart
    if cart:
        logger.info(f"Dropping cart {cart.cart_id} of driver {driver_user_id}: sponsor changed")
        crud_cart.delete_cart(db, cart)
        db.commit()

    cart = crud_cart.create_cart(db, driver_user_id=driver_user_id, sponsor_org_id=driver.sponsor_org_id)
    logger.info(f"Created cart {cart.cart_id} for driver {driver_user_id} in org {cart.sponsor_org_id}")
    return cart


def build_cart_response(cart: Cart) -> CartResponse:
    items = [
        CartItemResponse(
            item_id=cart_item.item_id,
            title=cart_item.item.title,
            image_url=cart_item.item.image_url,
            quantity=cart_item.quantity,
            points_price_at_add=cart_item.points_price_at_add,
            line_total=cart_item.points_price_at_add * cart_item.quantity,
        )
        for cart_item in cart.items
    ]
    return CartResponse(
        cart_id=cart.cart_id,
        driver_user_id=cart.driver_user_id,
        sponsor_org_id=cart.sponsor_org_id,
        items=items,
        total_points=sum(i.line_total for i in items),
    )


def get_cart(db: Session, driver_user_id: int) -> CartResponse:
    cart = crud_cart.get_driver_cart(db, driver_user_id)
    if not cart:
        raise NoActiveCartError(locales.ERROR_NO_ACTIVE_CART)
    return build_cart_response(cart)


def add_item(db: Session, cart_id: int, item_id: int, quantity: int = 1) -> CartItem:
    """
    Puts a catalog item of the cart's organization into the cart at its
    current points price. Adding it again only raises the quantity.
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError(locales.ERROR_QUANTITY_INVALID)

    cart = crud_cart.get_cart(db, cart_id)
    if not cart:
        raise NoActiveCartError(locales.ERROR_NO_ACTIVE_CART)

    item = crud_catalog.get_org_item(db, cart.sponsor_org_id, item_id)
    if not item:
        raise NotFoundError(locales.ERROR_ITEM_NOT_IN_CATALOG)
    if item.availability_status != "available":
        raise ValidationError(locales.ERROR_ITEM_UNAVAILABLE)

    cart_item = crud_cart.add_or_increment_cart_item(
        db, cart_id=cart_id, item_id=item_id, quantity=quantity, points_price=item.points_price
    )
    logger.info(f"Cart {cart_id}: item {item_id} x{quantity} (now x{cart_item.quantity})")
    return cart_item


def remove_item(db: Session, cart_id: int, item_id: int) -> None:
    if not crud_cart.get_cart(db, cart_id):
        raise NoActiveCartError(locales.ERROR_NO_ACTIVE_CART)
    if not crud_cart.remove_cart_item(db, cart_id, item_id):
        raise NotFoundError(locales.ERROR_ITEM_NOT_IN_CART)
    logger.info(f"Cart {cart_id}: removed item {item_id}")
