# driver_rewards/routers/cart.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from driver_rewards.core import locales
from driver_rewards.dependencies import get_db
from driver_rewards.schemas.cart import CartCreate, CartItemAdd, CartResponse
from driver_rewards.services import cart as cart_service

router = APIRouter()


@router.post("", response_model=CartResponse)
def get_or_create_cart(payload: CartCreate, db: Session = Depends(get_db)):
    """Returns the driver's cart, creating an empty one if needed."""
    cart = cart_service.get_or_create_cart(db, payload.driver_user_id)
    return cart_service.build_cart_response(cart)


@router.get("/driver/{driver_user_id}", response_model=CartResponse)
def get_driver_cart(driver_user_id: int, db: Session = Depends(get_db)):
    return cart_service.get_cart(db, driver_user_id)


@router.post("/{cart_id}/items")
def add_cart_item(cart_id: int, payload: CartItemAdd, db: Session = Depends(get_db)):
    cart_item = cart_service.add_item(db, cart_id, payload.item_id, payload.quantity)
    return {
        "message": locales.SUCCESS_ITEM_ADDED_TO_CART,
        "item_id": cart_item.item_id,
        "quantity": cart_item.quantity,
        "points_price_at_add": cart_item.points_price_at_add,
    }


@router.delete("/{cart_id}/items/{item_id}")
def remove_cart_item(cart_id: int, item_id: int, db: Session = Depends(get_db)):
    cart_service.remove_item(db, cart_id, item_id)
    return {"message": locales.SUCCESS_ITEM_REMOVED_FROM_CART}
