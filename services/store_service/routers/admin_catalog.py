"""Admin store catalog router: categories and products."""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from libs.auth.dependencies import require_admin
from libs.auth.models import SessionUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.store_service.models import Category, Order, Product
from services.store_service.routers._helpers import product_response
from services.store_service.schemas import (
    AdminDashboardResponse,
    AdminProductsResponse,
    CategoryCreate,
    CategoryResponse,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from services.store_service.services import catalog
from services.store_service.services.orders import paid_revenue
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["admin-store"])
logger = get_logger(__name__)


async def _count(db: AsyncSession, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return int(result.scalar_one())


async def _require_category(db: AsyncSession, category_id: int) -> None:
    if await catalog.get_category(db, category_id) is None:
        raise HTTPException(status_code=400, detail="Unknown category")


def _require_price(price_cents) -> int:
    if price_cents is None or price_cents < 0:
        raise HTTPException(
            status_code=400, detail="price_cents must be a non-negative integer"
        )
    return price_cents


@router.get("", response_model=AdminDashboardResponse)
async def dashboard(
    current_user: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Back-office landing numbers."""
    return AdminDashboardResponse(
        products=await _count(db, Product),
        categories=await _count(db, Category),
        orders=await _count(db, Order),
        paid_revenue_cents=await paid_revenue(db),
    )


# ============================================================================
# CATEGORIES
# ============================================================================


@router.get("/categories", response_model=list[CategoryResponse])
async def list_all_categories(
    current_user: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await catalog.list_categories(db)


@router.post(
    "/categories/new",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    category_in: CategoryCreate,
    current_user: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a new category. Names are unique."""
    name = (category_in.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Missing fields")

    existing = await db.execute(select(Category).where(Category.name == name))
    if existing.scalar_one_or_none():
        raise HTTPException(
            status_code=400, detail="Category with this name already exists"
        )

    category = Category(name=name)
    db.add(category)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=400, detail="Category with this name already exists"
        )
    await db.refresh(category)

    logger.info("Admin %s created category %s", current_user.id, category.id)
    return category


@router.post(
    "/categories/{category_id}/delete", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_category(
    category_id: int,
    current_user: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a category; its products stay, uncategorised."""
    category = await catalog.get_category(db, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    await db.execute(
        update(Product)
        .where(Product.category_id == category_id)
        .values(category_id=None)
    )
    await db.delete(category)
    await db.commit()

    logger.info("Admin %s deleted category %s", current_user.id, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# PRODUCTS
# ============================================================================


@router.get("/products", response_model=AdminProductsResponse)
async def list_all_products(
    current_user: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """All products (including inactive) plus categories for the edit form."""
    products = await catalog.list_products(db, include_inactive=True)
    categories = await catalog.list_categories(db)
    return AdminProductsResponse(
        products=[product_response(p) for p in products],
        categories=[CategoryResponse.model_validate(c) for c in categories],
    )


@router.post(
    "/products/new",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    product_in: ProductCreate,
    current_user: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a new product."""
    name = (product_in.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Missing fields")
    price_cents = _require_price(product_in.price_cents)
    if product_in.category_id is not None:
        await _require_category(db, product_in.category_id)

    product = Product(
        category_id=product_in.category_id,
        name=name,
        description=product_in.description or "",
        price_cents=price_cents,
        image_url=product_in.image_url or None,
        active=product_in.active,
    )
    db.add(product)
    await db.commit()

    logger.info("Admin %s created product %s", current_user.id, product.id)
    return product_response(await catalog.get_product(db, product.id))


@router.post("/products/{product_id}/edit", response_model=ProductResponse)
async def update_product(
    product_id: int,
    product_in: ProductUpdate,
    current_user: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Partial update. Past order items keep the price they were sold at."""
    product = await catalog.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    update_data = product_in.model_dump(exclude_unset=True)
    if "price_cents" in update_data:
        _require_price(update_data["price_cents"])
    if update_data.get("category_id") is not None:
        await _require_category(db, update_data["category_id"])
    for field in ("name", "description", "active"):
        if field in update_data and update_data[field] is None:
            update_data.pop(field)

    for field, value in update_data.items():
        setattr(product, field, value)
    await db.commit()

    logger.info(
        "Admin %s updated product %s (%s)",
        current_user.id,
        product_id,
        ", ".join(sorted(update_data)) or "no changes",
    )
    return product_response(await catalog.get_product(db, product_id))


@router.post("/products/{product_id}/delete", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: int,
    current_user: SessionUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    product = await catalog.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    await db.delete(product)
    await db.commit()

    logger.info("Admin %s deleted product %s", current_user.id, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
