"""Pydantic schemas for store service."""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# CATEGORY SCHEMAS
# ============================================================================


class CategoryCreate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


# ============================================================================
# PRODUCT SCHEMAS
# ============================================================================


class ProductCreate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    description: str = ""
    price_cents: Optional[int] = None
    image_url: Optional[str] = Field(None, max_length=1024)
    active: bool = True
    category_id: Optional[int] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price_cents: Optional[int] = None
    image_url: Optional[str] = Field(None, max_length=1024)
    active: Optional[bool] = None
    category_id: Optional[int] = None


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    name: str
    description: str
    price_cents: int
    image_url: Optional[str] = None
    active: bool
    created_at: datetime


class ProductDetail(ProductResponse):
    recommendations: list[ProductResponse] = []


class StorefrontResponse(BaseModel):
    categories: list[CategoryResponse]
    products: list[ProductResponse]


class CategoryPage(BaseModel):
    category: CategoryResponse
    products: list[ProductResponse]


class AdminProductsResponse(BaseModel):
    products: list[ProductResponse]
    categories: list[CategoryResponse]


# ============================================================================
# AUTH SCHEMAS
# ============================================================================


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class PrincipalResponse(BaseModel):
    id: int
    email: str
    name: str
    is_admin: bool


# ============================================================================
# CART SCHEMAS
# ============================================================================


class CartAddRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: Optional[Union[int, str]] = Field(None, alias="productId")


class CartAddResponse(BaseModel):
    ok: bool = True
    cart: dict[str, int]


class CartLineResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product: ProductResponse
    quantity: int
    line_total: int = Field(..., serialization_alias="lineTotal")


class CartResponse(BaseModel):
    items: list[CartLineResponse]
    total: int


# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    quantity: int
    unit_price_cents: int
    line_total_cents: int


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    user_email: Optional[str] = None
    status: str
    total_cents: int
    paystack_reference: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemResponse] = []


class OrderStatusUpdate(BaseModel):
    status: Optional[str] = None


class SuccessResponse(BaseModel):
    order_id: int


class AdminDashboardResponse(BaseModel):
    products: int
    categories: int
    orders: int
    paid_revenue_cents: int
