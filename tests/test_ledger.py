# tests/test_ledger.py

import pytest
from httpx import AsyncClient

from driver_rewards.core.errors import ForbiddenError, NotFoundError, ValidationError
from driver_rewards.crud import points as crud_points
from driver_rewards.models.points import PointTransaction
from driver_rewards.services import ledger as ledger_service


def test_balance_is_zero_without_history(db_session, driver):
    assert ledger_service.get_balance(db_session, driver.user_id) == 0


def test_balance_is_sum_of_all_rows(db_session, driver, org, give_points):
    give_points(driver, 150)
    give_points(driver, -40)
    give_points(driver, 15, source="recurring")

    assert ledger_service.get_balance(db_session, driver.user_id) == 125


@pytest.mark.parametrize("amount", [0, True, 1.5])
def test_append_rejects_bad_amounts(db_session, driver, org, amount):
    with pytest.raises(ValidationError):
        ledger_service.append_transaction(
            db_session, driver.user_id, org.sponsor_org_id, amount, "manual", reason="bonus"
        )
    assert db_session.query(PointTransaction).count() == 0


def test_append_rejects_unknown_source(db_session, driver, org):
    with pytest.raises(ValidationError):
        ledger_service.append_transaction(db_session, driver.user_id, org.sponsor_org_id, 10, "gift", reason="x")


@pytest.mark.parametrize("source", ["manual", "recurring"])
def test_append_requires_reason_for_sponsor_entries(db_session, driver, org, source):
    with pytest.raises(ValidationError):
        ledger_service.append_transaction(db_session, driver.user_id, org.sponsor_org_id, 10, source, reason="   ")


def test_order_rows_need_no_reason(db_session, driver, org, give_points):
    give_points(driver, 100)
    tx = ledger_service.append_transaction(db_session, driver.user_id, org.sponsor_org_id, -30, "order")
    assert tx.reason is None


def test_appended_row_is_visible_before_commit(db_session, driver, org):
    """Later checks in the same unit of work must already see the new row."""
    ledger_service.append_transaction(db_session, driver.user_id, org.sponsor_org_id, 25, "manual", reason="safe week")

    assert ledger_service.get_balance(db_session, driver.user_id) == 25
    db_session.rollback()
    assert ledger_service.get_balance(db_session, driver.user_id) == 0


def test_lock_driver_unknown_user(db_session):
    with pytest.raises(NotFoundError):
        ledger_service.lock_driver(db_session, 999)


def test_driver_points_rejects_non_driver(db_session, sponsor):
    with pytest.raises(ForbiddenError):
        ledger_service.get_driver_points(db_session, sponsor.user_id)


@pytest.mark.asyncio
async def test_get_driver_points(client: AsyncClient, driver, org, give_points):
    give_points(driver, 100)
    give_points(driver, -20)

    response = await client.get(f"/api/driver/points/{driver.user_id}")

    assert response.status_code == 200
    data = response.json()
    assert data["total_points"] == 80
    assert data["sponsor_name"] == org.name
    assert data["driver_status"] == "active"
    assert len(data["transactions"]) == 2
    # Newest first
    assert data["transactions"][0]["point_amount"] == -20
    assert all(tx["sponsor_name"] == org.name for tx in data["transactions"])


@pytest.mark.asyncio
async def test_get_driver_points_unknown_user(client: AsyncClient):
    response = await client.get("/api/driver/points/424242")
    assert response.status_code == 404
    assert response.json()["reason"] == "not_found"


@pytest.mark.asyncio
async def test_reads_do_not_change_state(client: AsyncClient, db_session, driver, give_points):
    give_points(driver, 70)

    first = await client.get(f"/api/driver/points/{driver.user_id}")
    second = await client.get(f"/api/driver/points/{driver.user_id}")

    assert first.json() == second.json()
    assert crud_points.count_driver_transactions(db_session, driver.user_id) == 1


@pytest.mark.asyncio
async def test_lifetime_points(client: AsyncClient, driver, give_points):
    give_points(driver, 300)
    give_points(driver, -100)

    response = await client.get(f"/api/user/lifetime-points/{driver.user_id}")

    assert response.status_code == 200
    assert response.json() == {"lifetime_points": 200}
