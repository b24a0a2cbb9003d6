# tests/conftest.py
from decimal import Decimal
from typing import Callable
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from driver_rewards.clients.ebay import EbayClient, TokenCache, get_ebay_client
from driver_rewards.core.redis import get_redis_client
from driver_rewards.crud import points as crud_points
from driver_rewards.db.session import Base
from driver_rewards.dependencies import get_db
from driver_rewards.main import app
from driver_rewards.models import CatalogItem, SponsorOrganization, User
import driver_rewards.models  # noqa: F401  (registers every table)

# In-memory SQLite for tests: fast and isolated. StaticPool keeps one connection
# so every session sees the same database.
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Not a real hash; login tests create their own users with hashed passwords
DUMMY_PASSWORD_HASH = "not-a-real-hash"


@pytest.fixture(scope="function")
def db_session() -> Session:
    """
    A clean database for every test.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


# --- Factories ---

@pytest.fixture
def make_org(db_session) -> Callable[..., SponsorOrganization]:
    def _make_org(name: str = "Acme Freight", point_value=100, **limits) -> SponsorOrganization:
        org = SponsorOrganization(name=name, point_value=Decimal(str(point_value)), **limits)
        db_session.add(org)
        db_session.commit()
        db_session.refresh(org)
        return org
    return _make_org


@pytest.fixture
def make_user(db_session) -> Callable[..., User]:
    counter = {"n": 0}

    def _make_user(
        user_type: str = "driver",
        org: SponsorOrganization | None = None,
        driver_status: str | None = None,
        password_hash: str = DUMMY_PASSWORD_HASH,
        **fields,
    ) -> User:
        counter["n"] += 1
        n = counter["n"]
        if user_type == "driver" and driver_status is None:
            driver_status = "active" if org else "unaffiliated"
        user = User(
            email=fields.pop("email", f"{user_type}{n}@example.com"),
            username=fields.pop("username", f"{user_type}{n}"),
            password_hash=password_hash,
            user_type=user_type,
            sponsor_org_id=org.sponsor_org_id if org else None,
            driver_status=driver_status,
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_item(db_session) -> Callable[..., CatalogItem]:
    counter = {"n": 0}

    def _make_item(org: SponsorOrganization, points_price: int, price_usd="10.00", **fields) -> CatalogItem:
        counter["n"] += 1
        item = CatalogItem(
            sponsor_org_id=org.sponsor_org_id,
            ebay_item_id=fields.pop("ebay_item_id", f"v1|{counter['n']}|0"),
            title=fields.pop("title", f"Item {counter['n']}"),
            last_price_value=Decimal(str(price_usd)),
            points_price=points_price,
            **fields,
        )
        db_session.add(item)
        db_session.commit()
        db_session.refresh(item)
        return item
    return _make_item


@pytest.fixture
def give_points(db_session) -> Callable[..., None]:
    """Seeds the ledger directly, bypassing limits."""
    def _give_points(driver: User, amount: int, org: SponsorOrganization | None = None, source: str = "manual") -> None:
        crud_points.create_transaction(
            db_session,
            driver_user_id=driver.user_id,
            sponsor_org_id=org.sponsor_org_id if org else driver.sponsor_org_id,
            point_amount=amount,
            source=source,
            reason="seed",
        )
        db_session.commit()
    return _give_points


@pytest.fixture
def org(make_org) -> SponsorOrganization:
    return make_org()


@pytest.fixture
def sponsor(make_user, org) -> User:
    return make_user(user_type="sponsor", org=org)


@pytest.fixture
def driver(make_user, org) -> User:
    return make_user(org=org)


# --- Marketplace / Redis doubles ---

@pytest.fixture
def mock_redis() -> AsyncMock:
    redis = AsyncMock()
    redis.get.return_value = None
    return redis


@pytest.fixture
def make_ebay_client() -> Callable[..., EbayClient]:
    """Builds an EbayClient whose HTTP traffic goes to `handler` instead of eBay."""
    def _make(handler: Callable[[httpx.Request], httpx.Response], token_cache: TokenCache | None = None) -> EbayClient:
        client = EbayClient(
            client_id="client-id",
            client_secret="client-secret",
            base_url="https://api.ebay.test",
            oauth_url="https://api.ebay.test/identity/v1/oauth2/token",
            scope="https://api.ebay.com/oauth/api_scope",
            marketplace_id="EBAY_US",
            token_cache=token_cache or TokenCache(),
            transport=httpx.MockTransport(handler),
        )
        return client

    return _make


# --- API client ---

@pytest_asyncio.fixture
async def client(db_session, mock_redis):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis_client] = lambda: mock_redis

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def use_ebay_client():
    """Routes the API's eBay dependency to the given client for this test."""
    def _use(ebay_client: EbayClient) -> None:
        app.dependency_overrides[get_ebay_client] = lambda: ebay_client
    return _use
