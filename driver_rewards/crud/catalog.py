# driver_rewards/crud/catalog.py
from typing import List
from sqlalchemy.orm import Session

from driver_rewards.models.cart import CartItem
from driver_rewards.models.catalog import CatalogItem
from driver_rewards.models.order import OrderItem


def get_item(db: Session, item_id: int) -> CatalogItem | None:
    return db.query(CatalogItem).filter(CatalogItem.item_id == item_id).first()

def get_org_item(db: Session, sponsor_org_id: int, item_id: int) -> CatalogItem | None:
    return db.query(CatalogItem).filter_by(sponsor_org_id=sponsor_org_id, item_id=item_id).first()

def get_item_by_ebay_id(db: Session, sponsor_org_id: int, ebay_item_id: str) -> CatalogItem | None:
    return db.query(CatalogItem).filter_by(sponsor_org_id=sponsor_org_id, ebay_item_id=ebay_item_id).first()

def get_org_items(db: Session, sponsor_org_id: int) -> List[CatalogItem]:
    return db.query(CatalogItem).filter(
        CatalogItem.sponsor_org_id == sponsor_org_id
    ).order_by(CatalogItem.created_at.desc(), CatalogItem.item_id.desc()).all()

def delete_item(db: Session, item: CatalogItem) -> None:
    """
    Removes a mirrored item. Order history keeps its own snapshot, so order
    rows only lose the link; open carts drop the item.
    """
    db.query(OrderItem).filter(OrderItem.item_id == item.item_id).update(
        {"item_id": None}, synchronize_session=False
    )
    db.query(CartItem).filter(CartItem.item_id == item.item_id).delete(synchronize_session=False)
    db.delete(item)
