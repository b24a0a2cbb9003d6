# driver_rewards/routers/catalog.py

import logging
from typing import List
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from sqlalchemy.orm import Session

from driver_rewards.clients.ebay import EbayClient, get_ebay_client
from driver_rewards.core import locales
from driver_rewards.core.redis import get_redis_client
from driver_rewards.dependencies import get_db
from driver_rewards.schemas.catalog import CatalogItem, CatalogItemCreate, MarketplaceItem, OrgCatalog
from driver_rewards.services import catalog as catalog_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/catalog", response_model=List[MarketplaceItem])
async def search_catalog(
    q: str | None = Query(None),
    client: EbayClient = Depends(get_ebay_client),
    redis: Redis = Depends(get_redis_client),
):
    """Live marketplace search. An empty `q` searches the default queries."""
    return await catalog_service.search(client, redis, q)


@router.get("/catalog/org/{org_id}", response_model=OrgCatalog)
def get_org_catalog(org_id: int, db: Session = Depends(get_db)):
    return OrgCatalog(items=catalog_service.list_org_items(db, org_id))


@router.post("/catalog/org/{org_id}/items", response_model=CatalogItem, status_code=status.HTTP_201_CREATED)
def add_catalog_item(org_id: int, payload: CatalogItemCreate, db: Session = Depends(get_db)):
    return catalog_service.add_item(db, org_id, payload)


@router.delete("/catalog/items/{item_id}")
def remove_catalog_item(item_id: int, db: Session = Depends(get_db)):
    catalog_service.remove_item(db, item_id)
    return {"message": locales.SUCCESS_CATALOG_ITEM_REMOVED}


@router.get("/proxy-image")
async def proxy_image(url: str | None = Query(None), client: EbayClient = Depends(get_ebay_client)):
    if not url:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": locales.ERROR_URL_REQUIRED})
    return await catalog_service.proxy_image(client, url)
