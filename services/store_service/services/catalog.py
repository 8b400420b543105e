"""Catalog reads and the product view log."""

from typing import Optional

from libs.common.logging import get_logger
from services.store_service.models import Category, Event, EventAction, Product
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)


async def list_categories(db: AsyncSession) -> list[Category]:
    result = await db.execute(select(Category).order_by(Category.name))
    return list(result.scalars().all())


async def get_category(db: AsyncSession, category_id: int) -> Optional[Category]:
    result = await db.execute(select(Category).where(Category.id == category_id))
    return result.scalar_one_or_none()


async def list_products(
    db: AsyncSession,
    *,
    category_id: Optional[int] = None,
    include_inactive: bool = False,
) -> list[Product]:
    """Products newest first, with their category loaded."""
    query = (
        select(Product)
        .options(selectinload(Product.category))
        .order_by(Product.created_at.desc(), Product.id.desc())
    )
    if not include_inactive:
        query = query.where(Product.active.is_(True))
    if category_id is not None:
        query = query.where(Product.category_id == category_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_product(db: AsyncSession, product_id: int) -> Optional[Product]:
    query = (
        select(Product)
        .where(Product.id == product_id)
        .options(selectinload(Product.category))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def record_view(db: AsyncSession, *, user_id: int, product_id: int) -> None:
    """Append a ``view`` event. Nothing reads these back at request time."""
    db.add(Event(user_id=user_id, product_id=product_id, action=EventAction.VIEW.value))
    await db.commit()
