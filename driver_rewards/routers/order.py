# driver_rewards/routers/order.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from driver_rewards.dependencies import get_db
from driver_rewards.schemas.order import OrderCreate, OrderCreated, OrderItemList, OrderList
from driver_rewards.services import order as order_service

router = APIRouter()


@router.post("", response_model=OrderCreated, status_code=status.HTTP_201_CREATED)
def place_order(payload: OrderCreate, db: Session = Depends(get_db)):
    """Checks out the cart: one order, one ledger debit, or nothing at all."""
    return order_service.checkout(db, payload.driver_user_id, payload.sponsor_org_id, payload.cart_id)


@router.get("/driver/{driver_user_id}", response_model=OrderList)
def get_driver_orders(driver_user_id: int, db: Session = Depends(get_db)):
    return OrderList(orders=order_service.get_driver_orders(db, driver_user_id))


@router.get("/org/{org_id}", response_model=OrderList)
def get_org_orders(org_id: int, db: Session = Depends(get_db)):
    return OrderList(orders=order_service.get_org_orders(db, org_id))


@router.get("/{order_id}/items", response_model=OrderItemList)
def get_order_items(order_id: int, db: Session = Depends(get_db)):
    return OrderItemList(items=order_service.get_order_items(db, order_id))
