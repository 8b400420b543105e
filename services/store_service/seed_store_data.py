"""Seed script for store demo data.

Creates the admin account, the default categories and a few products so you
can test the checkout flow end-to-end. Safe to run repeatedly: rows that
already exist are left alone.

Usage:
    python -m services.store_service.seed_store_data
"""

import asyncio

from libs.auth.passwords import hash_password
from libs.common.config import Settings, get_settings
from libs.common.logging import configure_logging, get_logger
from libs.db.base import Base
from libs.db.config import (
    build_engine,
    build_session_factory,
    ensure_sqlite_directory,
)
from services.store_service.models import Category, Product, User
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = get_logger(__name__)

DEFAULT_CATEGORIES = ["Electronics", "Clothing"]

# (category, name, description, price_cents)
DEFAULT_PRODUCTS = [
    ("Electronics", "Smartphone", "A fast, modern smartphone.", 150000),
    ("Electronics", "Laptop", "Lightweight laptop for work and play.", 350000),
    ("Clothing", "T-Shirt", "Plain cotton t-shirt.", 5000),
    ("Clothing", "Jeans", "Classic blue jeans.", 12000),
]


async def _seed_admin(db: AsyncSession, settings: Settings) -> None:
    email = settings.SEED_ADMIN_EMAIL.strip().lower()
    existing = await db.execute(select(User).where(User.email == email))
    if existing.scalar_one_or_none():
        logger.info("Admin %s already exists, skipping", email)
        return

    db.add(
        User(
            name="Admin",
            email=email,
            password=hash_password(settings.SEED_ADMIN_PASSWORD),
            is_admin=True,
        )
    )
    logger.info("Seeded admin %s", email)


async def _seed_categories(db: AsyncSession) -> dict[str, Category]:
    result = await db.execute(select(Category))
    categories = {c.name: c for c in result.scalars().all()}

    for name in DEFAULT_CATEGORIES:
        if name not in categories:
            categories[name] = Category(name=name)
            db.add(categories[name])
    await db.flush()
    return categories


async def _seed_products(db: AsyncSession, categories: dict[str, Category]) -> None:
    result = await db.execute(select(Product.name))
    existing_names = set(result.scalars().all())

    for category_name, name, description, price_cents in DEFAULT_PRODUCTS:
        if name in existing_names:
            continue
        db.add(
            Product(
                category_id=categories[category_name].id,
                name=name,
                description=description,
                price_cents=price_cents,
            )
        )
        logger.info("Seeded product %s", name)


async def seed_store_data(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> None:
    """Insert the admin, default categories and demo products if missing."""
    async with session_factory() as db:
        await _seed_admin(db, settings)
        categories = await _seed_categories(db)
        await _seed_products(db, categories)
        await db.commit()


async def main() -> None:
    settings = get_settings()
    configure_logging(settings)

    engine = build_engine(settings)
    ensure_sqlite_directory(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        await seed_store_data(build_session_factory(engine), settings)
    finally:
        await engine.dispose()
    logger.info("Store seed complete")


if __name__ == "__main__":
    asyncio.run(main())
