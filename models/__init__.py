from .cart_item import CartItem
from .user import User
from .product import Product
from .order import Order, OrderItem



__all__ = ["User", "Product", "CartItem", "Order", "OrderItem"]
