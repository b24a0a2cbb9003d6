# driver_rewards/schemas/order.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List
from datetime import datetime


class OrderCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    driver_user_id: int = Field(alias="driverUserId")
    sponsor_org_id: int = Field(alias="sponsorOrgId")
    cart_id: int = Field(alias="cartId")


class OrderCreated(BaseModel):
    order_id: int
    points_spent: int
    remaining_balance: int


class OrderItem(BaseModel):
    order_item_id: int
    item_id: int | None = None
    title: str
    image_url: str | None = None
    points_price_at_purchase: int
    price_usd_at_purchase: float
    quantity: int

    class Config:
        from_attributes = True


class Order(BaseModel):
    order_id: int
    driver_user_id: int
    sponsor_org_id: int | None = None
    status: str
    total_points: int
    total_usd: float
    created_at: datetime
    driver_username: str | None = None

    class Config:
        from_attributes = True


class OrderList(BaseModel):
    orders: List[Order]


class OrderItemList(BaseModel):
    items: List[OrderItem]
