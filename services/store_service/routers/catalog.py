"""Store catalog router: storefront, product pages, category pages."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from libs.auth.dependencies import get_optional_user
from libs.auth.models import SessionUser
from libs.db.session import get_async_db
from services.store_service.routers._helpers import product_response
from services.store_service.schemas import (
    CategoryPage,
    CategoryResponse,
    ProductDetail,
    StorefrontResponse,
)
from services.store_service.services import catalog
from services.store_service.services.recommendations import related_products
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["store"])


@router.get("/", response_model=StorefrontResponse)
async def storefront(
    db: AsyncSession = Depends(get_async_db),
):
    """Categories by name and active products, newest first."""
    categories = await catalog.list_categories(db)
    products = await catalog.list_products(db)
    return StorefrontResponse(
        categories=[CategoryResponse.model_validate(c) for c in categories],
        products=[product_response(p) for p in products],
    )


@router.get("/product/{product_id}", response_model=ProductDetail)
async def get_product(
    product_id: int,
    current_user: Optional[SessionUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Product page with same-category recommendations."""
    product = await catalog.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Not found")

    if current_user:
        await catalog.record_view(db, user_id=current_user.id, product_id=product.id)

    recs = await related_products(db, product)
    return ProductDetail(
        **product_response(product).model_dump(),
        recommendations=[product_response(r) for r in recs],
    )


@router.get("/category/{category_id}", response_model=CategoryPage)
async def get_category(
    category_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    """Category page: active products, newest first."""
    category = await catalog.get_category(db, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Not found")

    products = await catalog.list_products(db, category_id=category.id)
    return CategoryPage(
        category=CategoryResponse.model_validate(category),
        products=[product_response(p) for p in products],
    )
