"""Enum definitions for store service models."""

import enum


class OrderStatus(str, enum.Enum):
    """Statuses the store itself assigns.

    ``orders.status`` is a free string column: admins may override it with any
    label, so not every persisted value maps onto this enum.
    """

    PENDING = "PENDING"
    PAID = "PAID"


class EventAction(str, enum.Enum):
    VIEW = "view"
