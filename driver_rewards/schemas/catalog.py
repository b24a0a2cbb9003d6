# driver_rewards/schemas/catalog.py
from pydantic import BaseModel, Field
from typing import List
from datetime import datetime


class MarketplaceItem(BaseModel):
    """A normalized eBay search result as the front end consumes it."""
    id: str
    itemId: str
    title: str
    description: str
    price: str
    currency: str = "USD"
    image: str                    # routed through /api/proxy-image
    rawImageUrl: str | None = None
    itemWebUrl: str | None = None
    condition: str | None = None


class CatalogItemCreate(BaseModel):
    ebay_item_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str | None = None
    image_url: str | None = None
    item_web_url: str | None = None
    last_price_value: float = Field(..., ge=0)
    availability_status: str = "available"


class CatalogItem(BaseModel):
    item_id: int
    sponsor_org_id: int
    ebay_item_id: str
    title: str
    description: str | None = None
    image_url: str | None = None
    item_web_url: str | None = None
    last_price_value: float
    points_price: int
    availability_status: str
    created_at: datetime

    class Config:
        from_attributes = True


class OrgCatalog(BaseModel):
    items: List[CatalogItem]
