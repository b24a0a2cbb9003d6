# driver_rewards/models/__init__.py
# All models are imported here so that string-based relationships resolve
# and Base.metadata knows every table (tests and Alembic rely on this).
from driver_rewards.models.organization import SponsorOrganization
from driver_rewards.models.user import User
from driver_rewards.models.points import PointTransaction, PointContest
from driver_rewards.models.catalog import CatalogItem
from driver_rewards.models.cart import Cart, CartItem
from driver_rewards.models.order import Order, OrderItem
from driver_rewards.models.application import DriverApplication

__all__ = [
    "SponsorOrganization",
    "User",
    "PointTransaction",
    "PointContest",
    "CatalogItem",
    "Cart",
    "CartItem",
    "Order",
    "OrderItem",
    "DriverApplication",
]
