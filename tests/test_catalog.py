# tests/test_catalog.py

import json
from decimal import Decimal

import httpx
import pytest
from httpx import AsyncClient
from redis.exceptions import RedisError

from driver_rewards.clients.ebay import TokenCache
from driver_rewards.core.config import settings
from driver_rewards.core.errors import UpstreamUnavailableError
from driver_rewards.models.cart import CartItem
from driver_rewards.models.catalog import CatalogItem
from driver_rewards.models.order import OrderItem
from driver_rewards.services import cart as cart_service
from driver_rewards.services import catalog as catalog_service
from driver_rewards.services import order as order_service

TOKEN_PATH = "/identity/v1/oauth2/token"


def summary(item_id, **fields):
    data = {
        "itemId": item_id,
        "title": f"Listing {item_id}",
        "price": {"value": "25", "currency": "USD"},
        "image": {"imageUrl": f"https://i.ebayimg.test/{item_id}.jpg"},
        "itemWebUrl": f"https://www.ebay.test/itm/{item_id}",
    }
    data.update(fields)
    return data


def marketplace(results_by_query=None, failing_queries=(), token_status=200, calls=None):
    """A fake eBay: OAuth plus a search endpoint keyed by the `q` parameter."""
    results_by_query = results_by_query or {}
    calls = calls if calls is not None else []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if request.url.path == TOKEN_PATH:
            if token_status != 200:
                return httpx.Response(token_status, json={"error": "invalid_client"})
            return httpx.Response(200, json={"access_token": "test-token", "expires_in": 7200})
        query = request.url.params.get("q")
        if query in failing_queries:
            return httpx.Response(500, json={"errors": [{"message": "boom"}]})
        return httpx.Response(200, json={"itemSummaries": results_by_query.get(query, [])})

    return handler


# --- Normalization ---

def test_normalize_full_item():
    item = catalog_service.normalize_item(summary("v1|1|0", shortDescription="Brand new", condition="New"))

    assert item.id == item.itemId == "v1|1|0"
    assert item.description == "Brand new"
    assert item.price == "25.00"
    assert item.rawImageUrl == "https://i.ebayimg.test/v1|1|0.jpg"
    assert item.image.startswith("/api/proxy-image?url=https%3A%2F%2Fi.ebayimg.test")
    assert item.itemWebUrl == "https://www.ebay.test/itm/v1|1|0"


def test_description_falls_back_to_condition():
    item = catalog_service.normalize_item(summary("a", condition="Used"))
    assert item.description == "Used"


def test_description_falls_back_to_default_text():
    item = catalog_service.normalize_item(summary("a"))
    assert item.description == "No description available"


def test_image_falls_back_to_first_thumbnail():
    raw = summary("a", thumbnailImages=[{"imageUrl": "https://i.ebayimg.test/thumb.jpg"}, {"imageUrl": "x"}])
    del raw["image"]

    item = catalog_service.normalize_item(raw)

    assert item.rawImageUrl == "https://i.ebayimg.test/thumb.jpg"
    assert "thumb.jpg" in item.image


def test_image_falls_back_to_placeholder():
    raw = summary("a", thumbnailImages=[])
    del raw["image"]

    item = catalog_service.normalize_item(raw)

    assert item.rawImageUrl is None
    assert "placeholder" in item.image


@pytest.mark.parametrize("price, expected", [({"value": "9.999"}, "10.00"), ({"value": "abc"}, "0.00"), (None, "0.00")])
def test_price_formatting(price, expected):
    raw = summary("a")
    raw["price"] = price
    assert catalog_service.normalize_item(raw).price == expected


# --- Token cache ---

def test_token_cache_honours_safety_margin():
    now = [1000.0]
    cache = TokenCache(safety_margin_seconds=300, clock=lambda: now[0])
    cache.store("abc", expires_in=600)

    now[0] = 1299.0
    assert cache.get() == "abc"
    now[0] = 1300.0
    assert cache.get() is None


@pytest.mark.asyncio
async def test_token_is_reused_until_expiry(make_ebay_client):
    now = [0.0]
    calls = []
    client = make_ebay_client(marketplace(calls=calls), token_cache=TokenCache(clock=lambda: now[0]))

    assert await client.get_access_token() == "test-token"
    assert await client.get_access_token() == "test-token"
    assert sum(1 for c in calls if c.url.path == TOKEN_PATH) == 1

    # 7200 - 300 seconds later the token is refreshed
    now[0] = 6900.0
    await client.get_access_token()
    assert sum(1 for c in calls if c.url.path == TOKEN_PATH) == 2


@pytest.mark.asyncio
async def test_token_request_uses_client_credentials(make_ebay_client):
    calls = []
    client = make_ebay_client(marketplace(calls=calls))

    await client.get_access_token()

    request = calls[0]
    assert request.method == "POST"
    assert b"grant_type=client_credentials" in request.content
    assert request.headers["authorization"].startswith("Basic ")


@pytest.mark.asyncio
async def test_token_failure_is_upstream_unavailable(make_ebay_client):
    client = make_ebay_client(marketplace(token_status=401))

    with pytest.raises(UpstreamUnavailableError):
        await client.get_access_token()


# --- Search ---

@pytest.mark.asyncio
async def test_search_passes_query_and_headers(make_ebay_client, mock_redis):
    calls = []
    client = make_ebay_client(marketplace({"headphones": [summary("1")]}, calls=calls))

    results = await catalog_service.search(client, mock_redis, "headphones")

    assert [r.itemId for r in results] == ["1"]
    search_call = calls[-1]
    assert search_call.url.params["q"] == "headphones"
    assert search_call.headers["authorization"] == "Bearer test-token"
    assert search_call.headers["x-ebay-c-marketplace-id"] == "EBAY_US"
    mock_redis.set.assert_awaited_once()


@pytest.mark.asyncio
async def test_empty_query_uses_defaults_and_dedupes(make_ebay_client, mock_redis, monkeypatch):
    monkeypatch.setattr(settings, "CATALOG_DEFAULT_QUERIES_STR", "mugs,vests,gloves")
    client = make_ebay_client(marketplace(
        {"mugs": [summary("1"), summary("2")], "vests": [summary("2"), summary("3")]},
        failing_queries={"gloves"},
    ))

    results = await catalog_service.search(client, mock_redis, "")

    assert [r.itemId for r in results] == ["1", "2", "3"]


@pytest.mark.asyncio
async def test_failing_queries_give_empty_result(make_ebay_client, mock_redis):
    client = make_ebay_client(marketplace(failing_queries={"boots"}))

    assert await catalog_service.search(client, mock_redis, "boots") == []


@pytest.mark.asyncio
async def test_cached_results_skip_marketplace(make_ebay_client, mock_redis):
    calls = []
    client = make_ebay_client(marketplace(calls=calls))
    cached = [catalog_service.normalize_item(summary("9")).model_dump(mode="json")]
    mock_redis.get.return_value = json.dumps(cached)

    results = await catalog_service.search(client, mock_redis, "anything")

    assert [r.itemId for r in results] == ["9"]
    assert calls == []


@pytest.mark.asyncio
async def test_redis_outage_is_ignored(make_ebay_client, mock_redis):
    mock_redis.get.side_effect = RedisError("down")
    mock_redis.set.side_effect = RedisError("down")
    client = make_ebay_client(marketplace({"hats": [summary("5")]}))

    results = await catalog_service.search(client, mock_redis, "hats")

    assert [r.itemId for r in results] == ["5"]


@pytest.mark.asyncio
async def test_catalog_endpoint(client: AsyncClient, make_ebay_client, use_ebay_client):
    use_ebay_client(make_ebay_client(marketplace({"phone": [summary("7", shortDescription="Unlocked")]})))

    response = await client.get("/api/catalog", params={"q": "phone"})

    assert response.status_code == 200
    [product] = response.json()
    assert product["itemId"] == "7"
    assert product["description"] == "Unlocked"
    assert product["price"] == "25.00"


@pytest.mark.asyncio
async def test_catalog_endpoint_token_failure_is_502(client: AsyncClient, make_ebay_client, use_ebay_client):
    use_ebay_client(make_ebay_client(marketplace(token_status=500)))

    response = await client.get("/api/catalog", params={"q": "phone"})

    assert response.status_code == 502
    assert response.json()["reason"] == "upstream_unavailable"


# --- Image proxy ---

@pytest.mark.asyncio
async def test_proxy_image_requires_url(client: AsyncClient):
    response = await client.get("/api/proxy-image")

    assert response.status_code == 400
    assert response.json() == {"error": "url parameter is required"}


@pytest.mark.asyncio
async def test_proxy_image_success(client: AsyncClient, make_ebay_client, use_ebay_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"\x89PNG", headers={"content-type": "image/png"})

    use_ebay_client(make_ebay_client(handler))

    response = await client.get("/api/proxy-image", params={"url": "https://i.ebayimg.test/a.png"})

    assert response.status_code == 200
    assert response.content == b"\x89PNG"
    assert response.headers["content-type"] == "image/png"
    assert response.headers["access-control-allow-origin"] == "*"
    assert "max-age=86400" in response.headers["cache-control"]


@pytest.mark.asyncio
async def test_proxy_image_upstream_error_serves_placeholder(client: AsyncClient, make_ebay_client, use_ebay_client):
    use_ebay_client(make_ebay_client(lambda request: httpx.Response(404)))

    response = await client.get("/api/proxy-image", params={"url": "https://i.ebayimg.test/missing.png"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert b"<svg" in response.content


@pytest.mark.asyncio
async def test_proxy_image_network_error_serves_placeholder(client: AsyncClient, make_ebay_client, use_ebay_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    use_ebay_client(make_ebay_client(handler))

    response = await client.get("/api/proxy-image", params={"url": "https://i.ebayimg.test/slow.png"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")


# --- Mirrored catalog ---

@pytest.mark.parametrize(
    "price, point_value, expected",
    [("10.00", "100", 1000), ("1.00", "2.5", 3), ("0.99", "100", 99), ("3.33", "0.15", 0)],
)
def test_points_price_rounds_half_up(price, point_value, expected):
    assert catalog_service.compute_points_price(Decimal(price), Decimal(point_value)) == expected


@pytest.mark.asyncio
async def test_add_mirror_item(client: AsyncClient, make_org):
    org = make_org(point_value="50")
    payload = {"ebay_item_id": "v1|123|0", "title": "Cooler", "last_price_value": 19.99}

    created = await client.post(f"/api/catalog/org/{org.sponsor_org_id}/items", json=payload)
    duplicate = await client.post(f"/api/catalog/org/{org.sponsor_org_id}/items", json=payload)
    listing = await client.get(f"/api/catalog/org/{org.sponsor_org_id}")

    assert created.status_code == 201
    assert created.json()["points_price"] == 1000  # 19.99 * 50 = 999.5
    assert duplicate.status_code == 409
    assert [i["ebay_item_id"] for i in listing.json()["items"]] == ["v1|123|0"]


@pytest.mark.asyncio
async def test_add_mirror_item_unknown_org(client: AsyncClient):
    response = await client.post(
        "/api/catalog/org/9999/items", json={"ebay_item_id": "x", "title": "t", "last_price_value": 1}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_remove_item_keeps_order_history(client: AsyncClient, db_session, org, driver, make_item, give_points):
    give_points(driver, 100)
    item = make_item(org, points_price=30, title="Gloves")
    cart = cart_service.get_or_create_cart(db_session, driver.user_id)
    cart_service.add_item(db_session, cart.cart_id, item.item_id)
    order_service.checkout(db_session, driver.user_id, org.sponsor_org_id, cart.cart_id)

    response = await client.delete(f"/api/catalog/items/{item.item_id}")

    assert response.status_code == 200
    assert db_session.query(CatalogItem).count() == 0
    order_item = db_session.query(OrderItem).one()
    assert order_item.item_id is None
    assert order_item.title == "Gloves"
    assert (await client.delete(f"/api/catalog/items/{item.item_id}")).status_code == 404


@pytest.mark.asyncio
async def test_point_value_change_reprices_items_not_carts(client: AsyncClient, db_session, org, driver, make_item):
    item = make_item(org, points_price=1000, price_usd="10.00")
    cart = cart_service.get_or_create_cart(db_session, driver.user_id)
    cart_service.add_item(db_session, cart.cart_id, item.item_id)

    response = await client.put(f"/api/organization/{org.sponsor_org_id}", json={"field": "point_value", "value": 150})

    assert response.status_code == 200
    db_session.refresh(item)
    assert item.points_price == 1500
    assert db_session.query(CartItem).one().points_price_at_add == 1000
