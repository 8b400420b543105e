"""Order engine: cart -> order -> Paystack round trip -> PAID.

Ordering guarantees:
- the order row and its items are committed together, before the gateway call
- the payment reference is persisted before the browser is redirected
- the cart is cleared only after Paystack accepted the initialize call
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

from libs.auth.models import SessionUser
from libs.common.config import Settings
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.store_service.models import Order, OrderItem, OrderStatus
from services.store_service.paystack_client import (
    PaystackClient,
    VerifiedTransaction,
)
from services.store_service.services.cart import PricedCart
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

MAX_STATUS_LENGTH = 32


class PaymentInitError(Exception):
    """Paystack did not hand back a checkout URL."""


@dataclass
class CheckoutResult:
    order: Order
    authorization_url: str


async def create_pending_order(
    db: AsyncSession,
    *,
    user_id: int,
    priced: PricedCart,
) -> Order:
    """Persist a PENDING order with price-snapshotted items in one transaction."""
    order = Order(
        user_id=user_id,
        status=OrderStatus.PENDING.value,
        total_cents=priced.total,
    )
    db.add(order)
    await db.flush()  # Get order ID

    for line in priced.lines:
        db.add(
            OrderItem(
                order_id=order.id,
                product_id=line.product.id,
                quantity=line.quantity,
                unit_price_cents=line.unit_price_cents,
            )
        )

    await db.commit()
    await db.refresh(order)

    logger.info(
        "Created order %s for user %s (total=%d, items=%d)",
        order.id,
        user_id,
        order.total_cents,
        len(priced.lines),
    )
    return order


def build_callback_url(settings: Settings, order_id: int) -> str:
    base = settings.BASE_URL.rstrip("/")
    return f"{base}/paystack/callback?{urlencode({'order': order_id})}"


async def start_payment(
    db: AsyncSession,
    *,
    order: Order,
    email: str,
    paystack: PaystackClient,
    settings: Settings,
) -> str:
    """Initialize the Paystack transaction and store its reference.

    Returns the hosted checkout URL.

    Raises:
        PaymentInitError: Paystack answered without an authorization_url
        PaystackError / httpx.HTTPError: propagated from the client
    """
    reference = Order.generate_reference(settings.PAYMENT_REFERENCE_PREFIX)
    initialized = await paystack.initialize_transaction(
        email=email,
        amount=order.total_cents,
        reference=reference,
        callback_url=build_callback_url(settings, order.id),
    )
    if not initialized.authorization_url:
        raise PaymentInitError("Paystack init failed")

    order.paystack_reference = reference
    await db.commit()

    logger.info("Initialized payment %s for order %s", reference, order.id)
    return initialized.authorization_url


async def checkout(
    db: AsyncSession,
    *,
    user: SessionUser,
    priced: PricedCart,
    paystack: PaystackClient,
    settings: Settings,
) -> CheckoutResult:
    """Create the order, then hand it to Paystack. The caller clears the cart."""
    order = await create_pending_order(db, user_id=user.id, priced=priced)
    authorization_url = await start_payment(
        db, order=order, email=user.email, paystack=paystack, settings=settings
    )
    return CheckoutResult(order=order, authorization_url=authorization_url)


def payment_confirms_order(order: Order, verified: VerifiedTransaction) -> bool:
    """A verified transaction settles ``order`` only if it is the one we issued."""
    if not verified.is_successful:
        return False
    if not order.paystack_reference:
        logger.warning("Order %s has no payment reference to settle", order.id)
        return False
    if verified.reference != order.paystack_reference:
        logger.warning(
            "Reference mismatch for order %s: got %s", order.id, verified.reference
        )
        return False
    if verified.amount is not None and verified.amount != order.total_cents:
        logger.warning(
            "Amount mismatch for order %s: got %s, expected %s",
            order.id,
            verified.amount,
            order.total_cents,
        )
        return False
    return True


async def mark_order_paid(db: AsyncSession, order: Order) -> Order:
    order.status = OrderStatus.PAID.value
    order.updated_at = utc_now()
    await db.commit()
    await db.refresh(order)
    logger.info("Order %s marked PAID", order.id)
    return order


async def set_order_status(db: AsyncSession, order: Order, new_status: str) -> Order:
    """Admin override. Any label is accepted; there is no transition table."""
    old_status = order.status
    order.status = new_status
    order.updated_at = utc_now()
    await db.commit()
    logger.info(
        "Order %s status overridden: %s -> %s", order.id, old_status, new_status
    )
    return await get_order(db, order.id)


async def get_order(db: AsyncSession, order_id: int) -> Optional[Order]:
    query = (
        select(Order)
        .where(Order.id == order_id)
        .options(selectinload(Order.items), selectinload(Order.user))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def list_orders(db: AsyncSession, *, user_id: Optional[int] = None) -> list[Order]:
    """All orders newest first, optionally for a single user."""
    query = (
        select(Order)
        .options(selectinload(Order.items), selectinload(Order.user))
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    if user_id is not None:
        query = query.where(Order.user_id == user_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def paid_revenue(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.coalesce(func.sum(Order.total_cents), 0)).where(
            Order.status == OrderStatus.PAID.value
        )
    )
    return int(result.scalar_one())
