# driver_rewards/schemas/cart.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List


class CartCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    driver_user_id: int = Field(alias="driverUserId")


class CartItemAdd(BaseModel):
    item_id: int
    quantity: int = 1


class CartItemResponse(BaseModel):
    item_id: int
    title: str
    image_url: str | None = None
    quantity: int
    points_price_at_add: int
    line_total: int


class CartResponse(BaseModel):
    cart_id: int
    driver_user_id: int
    sponsor_org_id: int
    items: List[CartItemResponse]
    total_points: int
