"""Related-product recommendations ranked by units sold."""

from services.store_service.models import OrderItem, Product
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

DEFAULT_RECOMMENDATION_LIMIT = 6


async def related_products(
    db: AsyncSession,
    product: Product,
    *,
    limit: int = DEFAULT_RECOMMENDATION_LIMIT,
) -> list[Product]:
    """Other active products in ``product``'s category, best sellers first.

    Order: total quantity sold desc, then newest first, then id desc so that
    products created in the same instant still sort the same way every call.
    """
    if product.category_id is None:
        return []

    sold = func.coalesce(func.sum(OrderItem.quantity), 0).label("sold")
    query = (
        select(Product, sold)
        .outerjoin(OrderItem, OrderItem.product_id == Product.id)
        .where(
            Product.active.is_(True),
            Product.category_id == product.category_id,
            Product.id != product.id,
        )
        .group_by(Product.id)
        .order_by(sold.desc(), Product.created_at.desc(), Product.id.desc())
        .limit(limit)
        .options(selectinload(Product.category))
    )
    result = await db.execute(query)
    return [row.Product for row in result.all()]
