# tests/test_limits.py

from datetime import datetime, timezone

import pytest

from driver_rewards.core.errors import LimitExceededError
from driver_rewards.models.points import PointTransaction
from driver_rewards.services import limits as limits_service


def test_month_start_is_first_day_at_midnight_utc():
    now = datetime(2026, 10, 19, 15, 42, 7, 123, tzinfo=timezone.utc)
    assert limits_service.month_start(now) == datetime(2026, 10, 1, tzinfo=timezone.utc)


def test_no_limits_allows_anything(db_session, org, driver):
    check = limits_service.check_limits(db_session, org, driver.user_id, 1_000_000)
    assert check.allowed
    assert check.violation is None


def test_upper_limit_is_inclusive(db_session, make_org, make_user, give_points):
    org = make_org(point_upper_limit=100)
    driver = make_user(org=org)
    give_points(driver, 90)

    assert limits_service.check_limits(db_session, org, driver.user_id, 10).allowed

    check = limits_service.check_limits(db_session, org, driver.user_id, 20)
    assert not check.allowed
    assert check.violation == "upper"
    assert "100" in check.detail


def test_lower_limit_is_inclusive(db_session, make_org, make_user, give_points):
    org = make_org(point_lower_limit=0)
    driver = make_user(org=org)
    give_points(driver, 50)

    assert limits_service.check_limits(db_session, org, driver.user_id, -50).allowed

    check = limits_service.check_limits(db_session, org, driver.user_id, -51)
    assert not check.allowed
    assert check.violation == "lower"


def test_monthly_cap_boundary(db_session, make_org, make_user, give_points):
    org = make_org(monthly_point_limit=500)
    driver = make_user(org=org)
    give_points(driver, 480)

    assert limits_service.check_limits(db_session, org, driver.user_id, 20).allowed

    check = limits_service.check_limits(db_session, org, driver.user_id, 30)
    assert not check.allowed
    assert check.violation == "monthly"
    assert "480" in check.detail


def test_monthly_cap_counts_only_awards(db_session, make_org, make_user, give_points):
    org = make_org(monthly_point_limit=500)
    driver = make_user(org=org)
    give_points(driver, 480)
    give_points(driver, -300, source="order")
    give_points(driver, -100)

    totals = limits_service.get_month_totals(db_session, org.sponsor_org_id)
    assert totals.month_awarded == 480
    assert totals.month_deducted == -400

    # Deductions and order debits never free up cap
    assert not limits_service.check_limits(db_session, org, driver.user_id, 30).allowed
    # Deductions are not checked against the cap at all
    assert limits_service.check_limits(db_session, org, driver.user_id, -50).allowed


def test_monthly_cap_is_organization_wide(db_session, make_org, make_user, give_points):
    org = make_org(monthly_point_limit=100)
    first = make_user(org=org)
    second = make_user(org=org)
    give_points(first, 90)

    check = limits_service.check_limits(db_session, org, second.user_id, 20)
    assert check.violation == "monthly"


def test_enforce_limits_raises_with_kind(db_session, make_org, make_user, give_points):
    org = make_org(point_upper_limit=10)
    driver = make_user(org=org)

    with pytest.raises(LimitExceededError) as exc_info:
        limits_service.enforce_limits(db_session, org, driver.user_id, 11)

    assert exc_info.value.kind == "upper"
    assert exc_info.value.reason == "limit_exceeded:upper"
    assert exc_info.value.status_code == 400


def test_check_limits_writes_nothing(db_session, make_org, make_user):
    org = make_org(point_upper_limit=5)
    driver = make_user(org=org)
    limits_service.check_limits(db_session, org, driver.user_id, 50)

    assert db_session.query(PointTransaction).count() == 0
