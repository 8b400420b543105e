"""Admin store orders router."""

from fastapi import APIRouter, Depends, HTTPException
from libs.auth.dependencies import require_admin
from libs.auth.models import SessionUser
from libs.db.session import get_async_db
from services.store_service.schemas import OrderResponse, OrderStatusUpdate
from services.store_service.services import orders as order_engine
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["admin-store"])


@router.get("/orders", response_model=list[OrderResponse])
async def list_all_orders(
    current_user: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """All orders with customer email and items, newest first."""
    return await order_engine.list_orders(db)


@router.post("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: int,
    status_in: OrderStatusUpdate,
    current_user: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Overwrite an order's status label."""
    new_status = (status_in.status or "").strip()
    if not new_status:
        raise HTTPException(status_code=400, detail="Missing status")
    if len(new_status) > order_engine.MAX_STATUS_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Status must be at most {order_engine.MAX_STATUS_LENGTH} characters",
        )

    order = await order_engine.get_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    return await order_engine.set_order_status(db, order, new_status)
