# Re-export all models from a single entry point so the rest of the package
# can import cleanly:
#   from shopseed.models import User, Product, Order
#
# Importing all models here also ensures they are registered with Base.metadata
# before any call to Base.metadata.create_all().

from shopseed.models.cart import Cart
from shopseed.models.order import Address, Order, OrderLineItem
from shopseed.models.product import Product
from shopseed.models.user import User

__all__ = [
    "Product",
    "User",
    "Address",
    "Cart",
    "Order",
    "OrderLineItem",
]
