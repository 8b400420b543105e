"""Store orders router: checkout, Paystack callback, order history."""

from typing import Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse
from libs.auth.dependencies import get_current_user
from libs.auth.models import SessionUser
from libs.common.config import Settings
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.store_service.app.dependencies import get_app_settings
from services.store_service.paystack_client import (
    PaystackClient,
    PaystackError,
    get_paystack_client,
)
from services.store_service.routers._helpers import parse_int_id
from services.store_service.schemas import OrderResponse, SuccessResponse
from services.store_service.services import orders as order_engine
from services.store_service.services.cart import SessionCart
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["store"])
logger = get_logger(__name__)


def _see_other(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


# ============================================================================
# CHECKOUT
# ============================================================================


@router.post("/checkout")
async def checkout(
    request: Request,
    current_user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
    paystack: PaystackClient = Depends(get_paystack_client),
    settings: Settings = Depends(get_app_settings),
):
    """Turn the session cart into a PENDING order and send the browser to Paystack."""
    cart = SessionCart(request.session)
    if cart.is_empty():
        return _see_other("/cart")

    priced = await cart.lines(db)
    if priced.is_empty():
        # Nothing in the cart exists any more
        return _see_other("/cart")

    try:
        result = await order_engine.checkout(
            db,
            user=current_user,
            priced=priced,
            paystack=paystack,
            settings=settings,
        )
    except (PaystackError, order_engine.PaymentInitError) as e:
        logger.error("Paystack initialize failed: %s", e)
        raise HTTPException(status_code=500, detail="Paystack init failed")
    except httpx.HTTPError as e:
        logger.error("Paystack initialize error: %s", e)
        raise HTTPException(status_code=500, detail=f"Paystack error: {e}")

    cart.clear()
    return _see_other(result.authorization_url)


@router.get("/paystack/callback")
async def paystack_callback(
    reference: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_async_db),
    paystack: PaystackClient = Depends(get_paystack_client),
):
    """
    Paystack browser return hook (no session auth; trusted only via verify).
    """
    if not reference or not order:
        raise HTTPException(status_code=400, detail="Missing params")
    order_id = parse_int_id(order, "order")

    db_order = await order_engine.get_order(db, order_id)
    if not db_order:
        raise HTTPException(status_code=404, detail="Order not found")
    if reference != db_order.paystack_reference:
        logger.warning(
            "Callback reference %r does not belong to order %s", reference, order_id
        )
        return _see_other("/cart")

    try:
        verified = await paystack.verify_transaction(reference)
    except PaystackError as e:
        logger.warning("Paystack verify rejected %s: %s", reference, e)
        return _see_other("/cart")
    except httpx.HTTPError as e:
        logger.error("Paystack verify error for %s: %s", reference, e)
        raise HTTPException(status_code=500, detail=f"Verify error: {e}")

    if not order_engine.payment_confirms_order(db_order, verified):
        return _see_other("/cart")

    await order_engine.mark_order_paid(db, db_order)
    return _see_other(f"/success?order={db_order.id}")


@router.get("/success", response_model=SuccessResponse)
async def checkout_success(order: Optional[str] = Query(None)):
    return SuccessResponse(order_id=parse_int_id(order, "order"))


# ============================================================================
# ORDERS
# ============================================================================


@router.get("/account", response_model=list[OrderResponse])
async def list_my_orders(
    current_user: SessionUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """List the caller's orders, newest first."""
    return await order_engine.list_orders(db, user_id=current_user.id)
