"""Shared helpers for store routers."""

from typing import Optional, Union

from fastapi import HTTPException, status
from services.store_service.models import Product
from services.store_service.schemas import ProductResponse
from services.store_service.services.cart import MAX_ROW_ID


def product_response(product: Product) -> ProductResponse:
    """Serialize a product whose ``category`` relationship is already loaded."""
    return ProductResponse.model_validate(product)


def parse_int_id(raw: Optional[Union[int, str]], field: str) -> int:
    """Coerce a body/query id to int, answering 400 when it is missing or junk."""
    if raw is None or isinstance(raw, bool):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"Missing {field}"
        )
    try:
        value = int(str(raw).strip())
    except ValueError:
        value = None
    if value is None or not 1 <= value <= MAX_ROW_ID:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {field}"
        )
    return value
