#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from artmarket.data.models.user import UserModel
from artmarket.data.models.listing import ListingModel
from artmarket.data.models.cart import CartModel
from artmarket.data.models.cart_item import CartItemModel

__all__ = ["UserModel", "ListingModel", "CartModel", "CartItemModel"]
