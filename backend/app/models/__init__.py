from app.models.medicine import Medicine
from app.models.cart_item import CartItem
from app.models.order import Order, OrderStatus

__all__ = ["Medicine", "CartItem", "Order", "OrderStatus"]
