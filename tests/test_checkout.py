# tests/test_checkout.py

import pytest
from httpx import AsyncClient

from driver_rewards.core.errors import InsufficientPointsError, NoActiveCartError, ValidationError
from driver_rewards.crud import points as crud_points
from driver_rewards.models.cart import Cart
from driver_rewards.models.order import Order, OrderItem
from driver_rewards.models.points import PointTransaction
from driver_rewards.services import cart as cart_service
from driver_rewards.services import order as order_service

pytestmark = pytest.mark.asyncio


def order_payload(driver, cart_id):
    return {"driverUserId": driver.user_id, "sponsorOrgId": driver.sponsor_org_id, "cartId": cart_id}


async def test_cart_flow_and_checkout(client: AsyncClient, db_session, org, driver, make_item, give_points):
    give_points(driver, 500)
    mug = make_item(org, points_price=120, title="Travel mug")
    vest = make_item(org, points_price=80, title="Safety vest")

    cart = (await client.post("/api/cart", json={"driverUserId": driver.user_id})).json()
    assert cart["items"] == []
    cart_id = cart["cart_id"]

    assert (await client.post(f"/api/cart/{cart_id}/items", json={"item_id": mug.item_id})).status_code == 200
    assert (await client.post(f"/api/cart/{cart_id}/items", json={"item_id": vest.item_id, "quantity": 2})).status_code == 200

    cart = (await client.get(f"/api/cart/driver/{driver.user_id}")).json()
    assert cart["total_points"] == 280

    response = await client.post("/api/orders", json=order_payload(driver, cart_id))

    assert response.status_code == 201
    data = response.json()
    assert data["points_spent"] == 280
    assert data["remaining_balance"] == 220

    # Exactly one order and one debit
    assert db_session.query(Order).count() == 1
    debits = db_session.query(PointTransaction).filter(PointTransaction.source == "order").all()
    assert len(debits) == 1
    assert debits[0].point_amount == -280
    assert crud_points.get_balance(db_session, driver.user_id) == 220

    items = (await client.get(f"/api/orders/{data['order_id']}/items")).json()["items"]
    assert {(i["title"], i["quantity"], i["points_price_at_purchase"]) for i in items} == {
        ("Travel mug", 1, 120),
        ("Safety vest", 2, 80),
    }

    # The cart is gone; the next one starts empty
    assert (await client.get(f"/api/cart/driver/{driver.user_id}")).status_code == 404
    fresh = (await client.post("/api/cart", json={"driverUserId": driver.user_id})).json()
    assert fresh["items"] == []


async def test_insufficient_points_changes_nothing(client: AsyncClient, db_session, org, driver, make_item, give_points):
    give_points(driver, 100)
    item = make_item(org, points_price=150)
    cart = cart_service.get_or_create_cart(db_session, driver.user_id)
    cart_service.add_item(db_session, cart.cart_id, item.item_id)

    response = await client.post("/api/orders", json=order_payload(driver, cart.cart_id))

    assert response.status_code == 400
    assert response.json()["reason"] == "insufficient_points"
    assert db_session.query(Order).count() == 0
    assert db_session.query(OrderItem).count() == 0
    assert crud_points.count_driver_transactions(db_session, driver.user_id) == 1
    assert crud_points.get_balance(db_session, driver.user_id) == 100
    # Cart is still there for another try
    assert db_session.query(Cart).filter(Cart.cart_id == cart.cart_id).count() == 1


async def test_exact_balance_is_enough(db_session, org, driver, make_item, give_points):
    give_points(driver, 150)
    item = make_item(org, points_price=150)
    cart = cart_service.get_or_create_cart(db_session, driver.user_id)
    cart_service.add_item(db_session, cart.cart_id, item.item_id)

    result = order_service.checkout(db_session, driver.user_id, org.sponsor_org_id, cart.cart_id)

    assert result.remaining_balance == 0
    assert crud_points.get_balance(db_session, driver.user_id) == 0


async def test_empty_cart_is_rejected(db_session, org, driver, give_points):
    give_points(driver, 100)
    cart = cart_service.get_or_create_cart(db_session, driver.user_id)

    with pytest.raises(ValidationError):
        order_service.checkout(db_session, driver.user_id, org.sponsor_org_id, cart.cart_id)


async def test_cart_of_another_driver_is_not_active(db_session, org, driver, make_user, make_item, give_points):
    other = make_user(org=org)
    give_points(driver, 1000)
    item = make_item(org, points_price=10)
    others_cart = cart_service.get_or_create_cart(db_session, other.user_id)
    cart_service.add_item(db_session, others_cart.cart_id, item.item_id)

    with pytest.raises(NoActiveCartError):
        order_service.checkout(db_session, driver.user_id, org.sponsor_org_id, others_cart.cart_id)
    assert db_session.query(Order).count() == 0


async def test_wrong_org_or_unknown_cart(client: AsyncClient, org, driver, make_item, give_points, db_session):
    give_points(driver, 1000)
    cart = cart_service.get_or_create_cart(db_session, driver.user_id)

    wrong_org = await client.post(
        "/api/orders", json={"driverUserId": driver.user_id, "sponsorOrgId": 9999, "cartId": cart.cart_id}
    )
    unknown_cart = await client.post("/api/orders", json=order_payload(driver, 9999))

    assert wrong_org.status_code == 404
    assert wrong_org.json()["reason"] == "no_active_cart"
    assert unknown_cart.status_code == 404


async def test_insufficient_points_error_carries_amounts(db_session, org, driver, make_item, give_points):
    give_points(driver, 10)
    item = make_item(org, points_price=25)
    cart = cart_service.get_or_create_cart(db_session, driver.user_id)
    cart_service.add_item(db_session, cart.cart_id, item.item_id, quantity=2)

    with pytest.raises(InsufficientPointsError) as exc_info:
        order_service.checkout(db_session, driver.user_id, org.sponsor_org_id, cart.cart_id)

    assert exc_info.value.required == 50
    assert exc_info.value.balance == 10


async def test_adding_twice_keeps_first_price(db_session, org, driver, make_item):
    item = make_item(org, points_price=100)
    cart = cart_service.get_or_create_cart(db_session, driver.user_id)
    cart_service.add_item(db_session, cart.cart_id, item.item_id)

    item.points_price = 140
    db_session.commit()
    line = cart_service.add_item(db_session, cart.cart_id, item.item_id, quantity=2)

    assert line.quantity == 3
    assert line.points_price_at_add == 100


async def test_add_item_validation(client: AsyncClient, db_session, org, driver, make_org, make_item):
    foreign_item = make_item(make_org(name="Other"), points_price=10)
    sold_out = make_item(org, points_price=10, availability_status="unavailable")
    cart = cart_service.get_or_create_cart(db_session, driver.user_id)

    foreign = await client.post(f"/api/cart/{cart.cart_id}/items", json={"item_id": foreign_item.item_id})
    unavailable = await client.post(f"/api/cart/{cart.cart_id}/items", json={"item_id": sold_out.item_id})
    zero = await client.post(f"/api/cart/{cart.cart_id}/items", json={"item_id": sold_out.item_id, "quantity": 0})
    no_cart = await client.post("/api/cart/9999/items", json={"item_id": sold_out.item_id})

    assert foreign.status_code == 404
    assert unavailable.status_code == 400
    assert zero.status_code == 400
    assert no_cart.status_code == 404
    assert no_cart.json()["reason"] == "no_active_cart"


async def test_remove_item(client: AsyncClient, db_session, org, driver, make_item):
    item = make_item(org, points_price=10)
    cart = cart_service.get_or_create_cart(db_session, driver.user_id)
    cart_service.add_item(db_session, cart.cart_id, item.item_id)

    removed = await client.delete(f"/api/cart/{cart.cart_id}/items/{item.item_id}")
    again = await client.delete(f"/api/cart/{cart.cart_id}/items/{item.item_id}")

    assert removed.status_code == 200
    assert again.status_code == 404
    assert cart_service.get_cart(db_session, driver.user_id).items == []


async def test_cart_requires_active_sponsor(client: AsyncClient, make_user):
    loner = make_user()

    response = await client.post("/api/cart", json={"driverUserId": loner.user_id})

    assert response.status_code == 400


async def test_get_cart_without_cart(client: AsyncClient, driver):
    response = await client.get(f"/api/cart/driver/{driver.user_id}")
    assert response.status_code == 404
    assert response.json()["reason"] == "no_active_cart"


async def test_ledger_never_drifts(client: AsyncClient, db_session, org, sponsor, driver, make_item):
    """Awards, deductions and checkouts: the balance always equals the sum of the rows."""
    item = make_item(org, points_price=45)
    steps = [200, -30, 75]
    for amount in steps:
        await client.post(
            "/api/sponsor/points",
            json={"sponsorUserId": sponsor.user_id, "driverIds": [driver.user_id], "pointAmount": amount, "reason": "r"},
        )
    cart = cart_service.get_or_create_cart(db_session, driver.user_id)
    cart_service.add_item(db_session, cart.cart_id, item.item_id, quantity=3)
    await client.post("/api/orders", json=order_payload(driver, cart.cart_id))

    rows = db_session.query(PointTransaction).filter(PointTransaction.driver_user_id == driver.user_id).all()
    reported = (await client.get(f"/api/driver/points/{driver.user_id}")).json()["total_points"]

    assert sum(r.point_amount for r in rows) == reported == 200 - 30 + 75 - 135


async def test_order_listings(client: AsyncClient, db_session, org, driver, make_item, give_points):
    give_points(driver, 100)
    item = make_item(org, points_price=40)
    cart = cart_service.get_or_create_cart(db_session, driver.user_id)
    cart_service.add_item(db_session, cart.cart_id, item.item_id)
    order_service.checkout(db_session, driver.user_id, org.sponsor_org_id, cart.cart_id)

    by_driver = (await client.get(f"/api/orders/driver/{driver.user_id}")).json()["orders"]
    by_org = (await client.get(f"/api/orders/org/{org.sponsor_org_id}")).json()["orders"]

    assert len(by_driver) == 1
    assert by_driver[0]["total_points"] == 40
    assert by_org[0]["driver_username"] == driver.username
    assert (await client.get("/api/orders/9999/items")).status_code == 404


async def test_failed_ledger_write_rolls_back_order(db_session, org, driver, make_item, give_points, mocker):
    give_points(driver, 100)
    item = make_item(org, points_price=60)
    cart = cart_service.get_or_create_cart(db_session, driver.user_id)
    cart_service.add_item(db_session, cart.cart_id, item.item_id)
    mocker.patch("driver_rewards.services.ledger.append_transaction", side_effect=RuntimeError("connection lost"))

    with pytest.raises(RuntimeError):
        order_service.checkout(db_session, driver.user_id, org.sponsor_org_id, cart.cart_id)

    assert db_session.query(Order).count() == 0
    assert db_session.query(OrderItem).count() == 0
    assert db_session.query(Cart).count() == 1
    assert crud_points.get_balance(db_session, driver.user_id) == 100


async def test_checkout_after_switching_sponsor(client: AsyncClient, db_session, org, driver, make_org, make_user, make_item, give_points):
    give_points(driver, 100)
    item = make_item(org, points_price=50)
    cart = cart_service.get_or_create_cart(db_session, driver.user_id)
    cart_service.add_item(db_session, cart.cart_id, item.item_id)
    cart_id = cart.cart_id
    other_org = make_org(name="Other Freight")
    other_sponsor = make_user(user_type="sponsor", org=other_org)

    application_id = (await client.post(
        "/api/application", json={"user_id": driver.user_id, "org_id": other_org.sponsor_org_id}
    )).json()["application"]["application_id"]
    await client.put(f"/api/application/{application_id}", json={"status": "approved", "user_id": other_sponsor.user_id})

    response = await client.post(
        "/api/orders", json={"driverUserId": driver.user_id, "sponsorOrgId": org.sponsor_org_id, "cartId": cart_id}
    )

    assert response.status_code == 404
    assert response.json()["reason"] == "no_active_cart"
    assert db_session.query(Cart).count() == 0
    assert db_session.query(Order).count() == 0
    assert crud_points.get_balance(db_session, driver.user_id) == 100


async def test_cart_of_former_sponsor_is_not_active(db_session, org, driver, make_org, make_item, give_points):
    give_points(driver, 100)
    item = make_item(org, points_price=50)
    cart = cart_service.get_or_create_cart(db_session, driver.user_id)
    cart_service.add_item(db_session, cart.cart_id, item.item_id)
    # the driver moved on while the old cart is still around
    driver.sponsor_org_id = make_org(name="Other Freight").sponsor_org_id
    db_session.commit()

    with pytest.raises(NoActiveCartError):
        order_service.checkout(db_session, driver.user_id, org.sponsor_org_id, cart.cart_id)

    assert db_session.query(Order).count() == 0
    assert crud_points.get_balance(db_session, driver.user_id) == 100


async def test_cart_of_dropped_driver_is_not_active(db_session, org, driver, make_item, give_points):
    give_points(driver, 100)
    cart = cart_service.get_or_create_cart(db_session, driver.user_id)
    cart_service.add_item(db_session, cart.cart_id, make_item(org, points_price=50).item_id)
    driver.driver_status = "dropped"
    db_session.commit()

    with pytest.raises(NoActiveCartError):
        order_service.checkout(db_session, driver.user_id, org.sponsor_org_id, cart.cart_id)
