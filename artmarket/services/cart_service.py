from typing import Dict, Any, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from artmarket.data.models.cart import CartModel
from artmarket.data.models.cart_item import CartItemModel
from artmarket.domain.errors import MissingFieldsError, NotFoundError
from artmarket.domain.schemas import (
    CartItemIn,
    CartItemOut,
    CartOut,
    CartPair,
    CartRemovalResult,
)
from artmarket.repos.cart_repo import CartRepo
from artmarket.utils.sanitize import is_blank
from artmarket.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("user_id", "art_id", "title", "image")


def to_item_out(item: CartItemModel) -> CartItemOut:
    return CartItemOut(art_id=item.art_id, title=item.title, price=item.price, image=item.image)


def to_cart_out(cart: CartModel) -> CartOut:
    return CartOut(id=cart.id, user_id=cart.user_id, items=[to_item_out(i) for i in cart.items])


class CartService:
    """
    Koszyk per user.
    commands (add, remove, remove_many) modyfikuja stan
    query (list_items) tylko odczyt
    Pusty koszyk == brak koszyka: usuniecie ostatniej pozycji kasuje dokument.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)

    #query
    def list_items(self, user_id: str) -> List[CartItemOut]:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")
        return [to_item_out(i) for i in cart.items]

    #commands
    def add_item(self, payload: CartItemIn) -> tuple[CartOut, bool]:
        """
        Dodaje pozycje (bez deduplikacji po art_id).
        Zwraca (koszyk, czy_utworzony).
        """
        missing = [f for f in REQUIRED_FIELDS if is_blank(getattr(payload, f))]
        if payload.price is None or payload.price <= 0:
            missing.append("price")
        if missing:
            raise MissingFieldsError(missing, message="Missing required fields")

        existing = self.repo.get_cart_by_user(payload.user_id)
        if existing:
            logger.info(f"Appending {payload.art_id} to cart of {payload.user_id}")
            return to_cart_out(self.repo.append_item(existing, self._item(payload))), False

        try:
            created = self.repo.create_cart(
                CartModel(user_id=payload.user_id, items=[self._item(payload)])
            )
        except IntegrityError:
            # ktos inny wlasnie utworzyl koszyk dla tego usera (unique user_id),
            # dopisujemy do jego koszyka zamiast tworzyc drugi
            self.repo.rollback()
            existing = self.repo.get_cart_by_user(payload.user_id)
            if not existing:
                raise
            logger.info(f"Cart for {payload.user_id} created concurrently, appending instead")
            return to_cart_out(self.repo.append_item(existing, self._item(payload))), False

        logger.info(f"Created cart {created.id} for {payload.user_id}")
        return to_cart_out(created), True

    def remove_item(self, user_id: str, art_id: str) -> Dict[str, Any]:
        """
        Usuwa wszystkie pozycje z danym art_id.
        Zwraca {"deleted": True} jesli koszyk zniknal, inaczej {"cart": CartOut}.
        """
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")

        matching = [i for i in cart.items if str(i.art_id) == str(art_id)]
        if not matching:
            raise NotFoundError("Item not found in the cart")

        if len(matching) == len(cart.items):
            self.repo.delete_cart(cart)
            logger.info(f"Cart of {user_id} is empty, deleted")
            return {"deleted": True, "cart": None}

        updated = self.repo.remove_items(cart, matching)
        logger.info(f"Removed {len(matching)} item(s) {art_id} from cart of {user_id}")
        return {"deleted": False, "cart": to_cart_out(updated)}

    def remove_many(self, pairs: List[CartPair]) -> List[CartRemovalResult]:
        """
        Batch delete - kazda para niezaleznie, bledy nie przerywaja reszty.
        Wynik per pozycja zamiast cichego sukcesu.
        """
        results = []
        for pair in pairs:
            if is_blank(pair.user_id) or is_blank(pair.art_id):
                logger.warning(f"Skipping incomplete cart pair {pair.user_id}/{pair.art_id}")
                results.append(self._result(pair, False, "Missing userId or artId"))
                continue

            try:
                outcome = self.remove_item(pair.user_id, pair.art_id)
            except NotFoundError as e:
                logger.warning(f"Batch delete {pair.user_id}/{pair.art_id}: {e}")
                results.append(self._result(pair, False, str(e)))
                continue

            detail = "Cart deleted" if outcome["deleted"] else "Item removed"
            results.append(self._result(pair, True, detail))
        return results

    @staticmethod
    def _item(payload: CartItemIn) -> CartItemModel:
        return CartItemModel(
            art_id=payload.art_id,
            title=payload.title,
            price=payload.price,
            image=payload.image,
        )

    @staticmethod
    def _result(pair: CartPair, removed: bool, detail: str) -> CartRemovalResult:
        return CartRemovalResult(user_id=pair.user_id, art_id=pair.art_id, removed=removed, detail=detail)
