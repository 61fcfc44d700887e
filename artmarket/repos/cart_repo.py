# artmarket/repos/cart_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from artmarket.data.models.cart import CartModel
from artmarket.data.models.cart_item import CartItemModel


class CartRepo:
    """
    Dostep do koszykow. Koszyk jest agregatem - pozycje zapisuja sie
    razem z nim (cascade), wiec repo nie ma osobnych metod na itemy.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def append_item(self, cart: CartModel, item: CartItemModel) -> CartModel:
        cart.items.append(item)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def remove_items(self, cart: CartModel, items: list[CartItemModel]) -> CartModel:
        for item in items:
            cart.items.remove(item)  # delete-orphan usuwa wiersz
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def delete_cart(self, cart: CartModel) -> None:
        self.db.delete(cart)
        self.db.commit()

    def rollback(self):
        self.db.rollback()
