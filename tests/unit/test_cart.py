"""Unit tests for the session cart and cart pricing.

The cart is exercised against a plain dict standing in for request.session.
"""

import pytest
from services.store_service.services.cart import (
    CART_SESSION_KEY,
    SessionCart,
    price_cart,
)
from tests.factories import CategoryFactory, ProductFactory


# ---------------------------------------------------------------------------
# SessionCart
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_add_increments_quantity():
    session = {}
    cart = SessionCart(session)

    cart.add(7)
    result = cart.add(7)

    assert result == {"7": 2}
    assert session[CART_SESSION_KEY] == {"7": 2}


@pytest.mark.unit
def test_add_keeps_other_products():
    cart = SessionCart({CART_SESSION_KEY: {"1": 3}})

    cart.add(2)

    assert cart.read() == {1: 3, 2: 1}


@pytest.mark.unit
def test_read_returns_copy():
    session = {CART_SESSION_KEY: {"5": 1}}
    cart = SessionCart(session)

    items = cart.read()
    items[5] = 99

    assert session[CART_SESSION_KEY] == {"5": 1}


@pytest.mark.unit
def test_clear_empties_cart():
    cart = SessionCart({CART_SESSION_KEY: {"1": 2}})
    assert not cart.is_empty()

    cart.clear()

    assert cart.is_empty()
    assert cart.read() == {}


@pytest.mark.unit
def test_missing_cart_reads_as_empty():
    cart = SessionCart({})
    assert cart.is_empty()
    assert cart.read() == {}


# ---------------------------------------------------------------------------
# price_cart
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_price_cart_uses_current_prices(db_session):
    category = CategoryFactory.create()
    db_session.add(category)
    await db_session.flush()
    phone = ProductFactory.create(category_id=category.id, price_cents=150000)
    shirt = ProductFactory.create(category_id=category.id, price_cents=5000)
    db_session.add_all([phone, shirt])
    await db_session.commit()

    priced = await price_cart(db_session, {phone.id: 1, shirt.id: 3})

    assert priced.total == 150000 + 3 * 5000
    totals = {line.product.id: line.line_total for line in priced.lines}
    assert totals == {phone.id: 150000, shirt.id: 15000}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_price_cart_drops_unknown_ids(db_session):
    product = ProductFactory.create(price_cents=1200)
    db_session.add(product)
    await db_session.commit()

    priced = await price_cart(db_session, {product.id: 2, 999999: 4})

    assert [line.product.id for line in priced.lines] == [product.id]
    assert priced.total == 2400


@pytest.mark.asyncio
@pytest.mark.unit
async def test_price_cart_with_only_unknown_ids_is_empty(db_session):
    priced = await price_cart(db_session, {424242: 1})

    assert priced.is_empty()
    assert priced.total == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_session_cart_lines_prices_through_catalog(db_session):
    product = ProductFactory.create(price_cents=700)
    db_session.add(product)
    await db_session.commit()

    cart = SessionCart({})
    cart.add(product.id)
    cart.add(product.id)

    priced = await cart.lines(db_session)

    assert priced.lines[0].quantity == 2
    assert priced.lines[0].unit_price_cents == 700
    assert priced.total == 1400


@pytest.mark.asyncio
@pytest.mark.unit
async def test_price_cart_skips_ids_outside_integer_range(db_session):
    product = ProductFactory.create(price_cents=2500)
    db_session.add(product)
    await db_session.commit()

    priced = await price_cart(db_session, {2**70: 1, -1: 2, product.id: 2})

    assert [line.product.id for line in priced.lines] == [product.id]
    assert priced.total == 5000
