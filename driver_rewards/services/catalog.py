# driver_rewards/services/catalog.py

import asyncio
import json
import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List
from urllib.parse import quote

import httpx
from fastapi import Response
from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from driver_rewards.clients.ebay import EbayClient
from driver_rewards.core import locales
from driver_rewards.core.config import settings
from driver_rewards.core.errors import ConflictError, NotFoundError
from driver_rewards.crud import catalog as crud_catalog
from driver_rewards.crud import organization as crud_organization
from driver_rewards.models.catalog import CatalogItem
from driver_rewards.models.organization import SponsorOrganization
from driver_rewards.schemas.catalog import CatalogItemCreate, MarketplaceItem

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description available"
PROXY_IMAGE_PATH = "/api/proxy-image"

PLACEHOLDER_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="300" height="300" viewBox="0 0 300 300">'
    '<rect width="300" height="300" fill="#e5e7eb"/>'
    '<text x="150" y="155" font-family="sans-serif" font-size="18" fill="#6b7280" '
    'text-anchor="middle">No Image</text>'
    '</svg>'
)


# --- Pricing ---

def compute_points_price(price_usd, point_value) -> int:
    """USD price times points-per-dollar, rounded half-up to whole points."""
    points = Decimal(str(price_usd)) * Decimal(str(point_value))
    return int(points.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# --- Mirrored items ---

def add_item(db: Session, sponsor_org_id: int, payload: CatalogItemCreate) -> CatalogItem:
    org = crud_organization.get_organization(db, sponsor_org_id)
    if not org:
        raise NotFoundError(locales.ERROR_ORGANIZATION_NOT_FOUND)
    if crud_catalog.get_item_by_ebay_id(db, sponsor_org_id, payload.ebay_item_id):
        raise ConflictError(locales.ERROR_CATALOG_ITEM_EXISTS)

    item = CatalogItem(
        sponsor_org_id=sponsor_org_id,
        ebay_item_id=payload.ebay_item_id,
        title=payload.title,
        description=payload.description,
        image_url=payload.image_url,
        item_web_url=payload.item_web_url,
        last_price_value=Decimal(str(payload.last_price_value)),
        points_price=compute_points_price(payload.last_price_value, org.point_value),
        availability_status=payload.availability_status,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info(
        f"Org {sponsor_org_id} mirrored eBay item {item.ebay_item_id} as catalog item {item.item_id} "
        f"at {item.points_price} points"
    )
    return item


def remove_item(db: Session, item_id: int) -> None:
    item = crud_catalog.get_item(db, item_id)
    if not item:
        raise NotFoundError(locales.ERROR_CATALOG_ITEM_NOT_FOUND)
    try:
        crud_catalog.delete_item(db, item)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Removed catalog item {item_id}")


def list_org_items(db: Session, sponsor_org_id: int) -> List[CatalogItem]:
    if not crud_organization.get_organization(db, sponsor_org_id):
        raise NotFoundError(locales.ERROR_ORGANIZATION_NOT_FOUND)
    return crud_catalog.get_org_items(db, sponsor_org_id)


def reprice_org_items(db: Session, org: SponsorOrganization) -> int:
    """
    Recomputes points_price of every mirrored item from the organization's
    current point_value. Cart snapshots are untouched. Requires db.commit().
    """
    items = crud_catalog.get_org_items(db, org.sponsor_org_id)
    for item in items:
        item.points_price = compute_points_price(item.last_price_value, org.point_value)
    return len(items)


# --- Marketplace search ---

def proxied_image_url(raw_url: str) -> str:
    return f"{PROXY_IMAGE_PATH}?url={quote(raw_url, safe='')}"


def _format_price(price: dict | None) -> str:
    value = (price or {}).get("value")
    try:
        return f"{Decimal(str(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}"
    except (InvalidOperation, ValueError):
        return "0.00"


def normalize_item(summary: dict, placeholder_url: str | None = None) -> MarketplaceItem:
    """
    Maps a raw Browse API item summary to the shape the front end renders.
    Missing fields fall back in a fixed order:
      description: shortDescription -> condition -> NO_DESCRIPTION
      image:       image.imageUrl -> thumbnailImages[0].imageUrl -> placeholder
    """
    placeholder_url = placeholder_url or settings.PLACEHOLDER_IMAGE_URL

    description_candidates = [summary.get("shortDescription"), summary.get("condition")]
    description = next((d for d in description_candidates if d), NO_DESCRIPTION)

    thumbnails = summary.get("thumbnailImages") or []
    image_candidates = [
        (summary.get("image") or {}).get("imageUrl"),
        thumbnails[0].get("imageUrl") if thumbnails else None,
    ]
    raw_image_url = next((url for url in image_candidates if url), None)

    item_id = str(summary.get("itemId", ""))
    return MarketplaceItem(
        id=item_id,
        itemId=item_id,
        title=summary.get("title") or "Untitled item",
        description=description,
        price=_format_price(summary.get("price")),
        currency=(summary.get("price") or {}).get("currency") or "USD",
        image=proxied_image_url(raw_image_url) if raw_image_url else placeholder_url,
        rawImageUrl=raw_image_url,
        itemWebUrl=summary.get("itemWebUrl"),
        condition=summary.get("condition"),
    )


async def _search_one(client: EbayClient, query: str, token: str) -> List[dict]:
    """A failing query contributes nothing."""
    try:
        return await client.search(query, limit=settings.EBAY_SEARCH_LIMIT, token=token)
    except (httpx.HTTPError, ValueError):
        logger.warning(f"eBay search for '{query}' failed; skipping it.", exc_info=True)
        return []


async def search(client: EbayClient, redis: Redis | None, query: str | None) -> List[MarketplaceItem]:
    """
    Searches the marketplace for `query`, or for the default queries when it
    is empty. Results are de-duplicated by itemId keeping the first
    occurrence, and cached in Redis for a short time.
    """
    query = (query or "").strip()
    queries = [query] if query else settings.CATALOG_DEFAULT_QUERIES
    cache_key = f"catalog:search:{query.lower() or '__default__'}"

    if redis is not None:
        try:
            cached = await redis.get(cache_key)
        except RedisError:
            logger.warning("Redis unavailable; catalog search runs uncached.", exc_info=True)
            cached = None
        if cached:
            logger.info(f"Serving catalog search '{query}' from cache.")
            return [MarketplaceItem.model_validate(item) for item in json.loads(cached)]

    token = await client.get_access_token()

    batches = await asyncio.gather(*(_search_one(client, q, token) for q in queries))

    seen = set()
    results: List[MarketplaceItem] = []
    for summaries in batches:
        for summary in summaries:
            item_id = summary.get("itemId")
            if not item_id or item_id in seen:
                continue
            seen.add(item_id)
            results.append(normalize_item(summary))

    logger.info(f"Catalog search '{query}' over {len(queries)} query(ies) returned {len(results)} item(s)")

    if redis is not None and results:
        try:
            await redis.set(
                cache_key,
                json.dumps([item.model_dump(mode="json") for item in results]),
                ex=settings.CATALOG_CACHE_TTL_SECONDS,
            )
        except RedisError:
            logger.warning("Could not cache catalog search results.", exc_info=True)

    return results


# --- Image proxy ---

def placeholder_image_response() -> Response:
    return Response(
        content=PLACEHOLDER_SVG,
        media_type="image/svg+xml",
        headers={"Cache-Control": "public, max-age=3600", "Access-Control-Allow-Origin": "*"},
    )


async def proxy_image(client: EbayClient, url: str) -> Response:
    """
    Streams an upstream image back to the browser. Any upstream failure is
    answered with an SVG placeholder rather than an error.
    """
    try:
        upstream = await client.fetch_image(url, timeout=settings.IMAGE_PROXY_TIMEOUT_SECONDS)
    except (httpx.HTTPError, httpx.InvalidURL):
        logger.warning(f"Image proxy could not fetch {url!r}; serving placeholder.", exc_info=True)
        return placeholder_image_response()

    return Response(
        content=upstream.content,
        media_type=upstream.headers.get("content-type", "image/jpeg"),
        headers={"Cache-Control": "public, max-age=86400", "Access-Control-Allow-Origin": "*"},
    )
