"""Store cart router: session cart operations."""

from fastapi import APIRouter, Depends, Request
from libs.db.session import get_async_db
from services.store_service.routers._helpers import parse_int_id, product_response
from services.store_service.schemas import (
    CartAddRequest,
    CartAddResponse,
    CartLineResponse,
    CartResponse,
)
from services.store_service.services.cart import SessionCart
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["store"])


@router.post("/cart/add", response_model=CartAddResponse)
async def add_to_cart(payload: CartAddRequest, request: Request):
    """Add one unit of a product. The id is not checked against the catalog."""
    product_id = parse_int_id(payload.product_id, "productId")
    cart = SessionCart(request.session)
    return CartAddResponse(ok=True, cart=cart.add(product_id))


@router.get("/cart", response_model=CartResponse)
async def get_cart(
    request: Request,
    db: AsyncSession = Depends(get_async_db),
):
    """Current cart priced at catalog prices; unknown ids are left out."""
    priced = await SessionCart(request.session).lines(db)
    return CartResponse(
        items=[
            CartLineResponse(
                product=product_response(line.product),
                quantity=line.quantity,
                line_total=line.line_total,
            )
            for line in priced.lines
        ],
        total=priced.total,
    )
