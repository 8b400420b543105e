"""Session cart: product id -> quantity, kept in the signed session cookie.

Nothing here writes to the database. Ids that no longer resolve against the
catalog ride along until the cart is priced (``price_cart``), where they are
silently dropped.
"""

from dataclasses import dataclass, field
from typing import Any, MutableMapping

from services.store_service.models import Product
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

CART_SESSION_KEY = "cart"

# Largest id an INTEGER primary key can hold
MAX_ROW_ID = 2**63 - 1


class SessionCart:
    """Cart bound to one session mapping (``request.session``)."""

    def __init__(self, session: MutableMapping[str, Any]):
        self._session = session

    def _items(self) -> dict[str, int]:
        return dict(self._session.get(CART_SESSION_KEY) or {})

    def add(self, product_id: int) -> dict[str, int]:
        """Increment ``product_id`` by one and return the new cart."""
        items = self._items()
        key = str(product_id)
        items[key] = int(items.get(key, 0)) + 1
        # Reassign so the session middleware sees a modification
        self._session[CART_SESSION_KEY] = items
        return items

    def read(self) -> dict[int, int]:
        return {int(pid): int(qty) for pid, qty in self._items().items()}

    def clear(self) -> None:
        self._session[CART_SESSION_KEY] = {}

    def is_empty(self) -> bool:
        return not self._items()

    async def lines(self, db: AsyncSession) -> "PricedCart":
        """Price the cart against the catalog (see ``price_cart``)."""
        return await price_cart(db, self.read())


@dataclass
class CartLine:
    product: Product
    quantity: int

    @property
    def unit_price_cents(self) -> int:
        return self.product.price_cents

    @property
    def line_total(self) -> int:
        return self.quantity * self.product.price_cents


@dataclass
class PricedCart:
    lines: list[CartLine] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(line.line_total for line in self.lines)

    def is_empty(self) -> bool:
        return not self.lines


async def price_cart(db: AsyncSession, items: dict[int, int]) -> PricedCart:
    """Resolve cart ids against the catalog at current prices.

    Unknown ids are skipped rather than reported.
    """
    ids = [pid for pid in items if 1 <= pid <= MAX_ROW_ID]
    if not ids:
        return PricedCart()

    query = (
        select(Product)
        .where(Product.id.in_(ids))
        .options(selectinload(Product.category))
        .order_by(Product.id)
    )
    result = await db.execute(query)
    products = result.scalars().all()

    return PricedCart(
        lines=[CartLine(product=p, quantity=items[p.id]) for p in products]
    )
