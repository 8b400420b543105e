"""Store Service models package."""

from services.store_service.models.catalog import Category, Product
from services.store_service.models.commerce import Event, Order, OrderItem
from services.store_service.models.enums import EventAction, OrderStatus
from services.store_service.models.identity import User

__all__ = [
    "Category",
    "Event",
    "EventAction",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Product",
    "User",
]
