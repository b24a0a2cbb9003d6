# driver_rewards/crud/cart.py
from sqlalchemy.orm import Session

from driver_rewards.models.cart import Cart, CartItem


def get_cart(db: Session, cart_id: int) -> Cart | None:
    return db.query(Cart).filter(Cart.cart_id == cart_id).first()

def get_driver_cart(db: Session, driver_user_id: int) -> Cart | None:
    """The driver's one live cart, if any."""
    return db.query(Cart).filter(Cart.driver_user_id == driver_user_id).first()

def create_cart(db: Session, driver_user_id: int, sponsor_org_id: int) -> Cart:
    cart = Cart(driver_user_id=driver_user_id, sponsor_org_id=sponsor_org_id)
    db.add(cart)
    db.commit()
    db.refresh(cart)
    return cart

def get_cart_item(db: Session, cart_id: int, item_id: int) -> CartItem | None:
    return db.query(CartItem).filter_by(cart_id=cart_id, item_id=item_id).first()

def add_or_increment_cart_item(db: Session, cart_id: int, item_id: int, quantity: int, points_price: int) -> CartItem:
    """
    Adds an item to the cart or bumps its quantity. The price snapshot of an
    existing line is left as it was when first added.
    """
    cart_item = get_cart_item(db, cart_id, item_id)
    if cart_item:
        cart_item.quantity += quantity
    else:
        cart_item = CartItem(
            cart_id=cart_id,
            item_id=item_id,
            quantity=quantity,
            points_price_at_add=points_price,
        )
        db.add(cart_item)
    db.commit()
    db.refresh(cart_item)
    return cart_item

def remove_cart_item(db: Session, cart_id: int, item_id: int) -> bool:
    cart_item = get_cart_item(db, cart_id, item_id)
    if cart_item:
        db.delete(cart_item)
        db.commit()
        return True
    return False

def delete_cart(db: Session, cart: Cart) -> None:
    """Deletes the cart together with its items. Requires db.commit() by the caller."""
    db.delete(cart)
