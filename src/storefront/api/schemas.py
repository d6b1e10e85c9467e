"""Pydantic request/response schemas for the Storefront API.

These are external contracts, separate from the internal Protean commands. JSON
uses the camelCase names the browser client sends (``userId``,
``imageUrl``); snake_case is accepted on input as well.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

OrderStatusValue = Literal["pending", "processing", "shipped", "delivered", "cancelled"]


class StorefrontModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# ---------------------------------------------------------------------------
# Product Request Schemas
# ---------------------------------------------------------------------------
class CreateProductRequest(StorefrontModel):
    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "Wireless Headphones",
                    "price": 99.99,
                    "description": "High-quality wireless headphones with noise cancellation",
                    "imageUrl": "https://via.placeholder.com/200x200?text=Headphones",
                    "category": "Electronics",
                    "stock": 50,
                    "featured": True,
                    "tags": ["audio", "wireless"],
                }
            ]
        }
    )

    id: str | None = Field(None, max_length=64)
    name: str = Field(..., min_length=1, max_length=200)
    price: float = Field(..., ge=0)
    original_price: float | None = Field(None, ge=0)
    description: str | None = Field(None, max_length=1000)
    image_url: str | None = Field(None, max_length=500)
    category: str | None = Field(None, max_length=50)
    stock: int = Field(..., ge=0)
    rating: float | None = Field(None, ge=0, le=5)
    reviews: int | None = Field(None, ge=0)
    featured: bool = False
    tags: list[str] | None = None


class UpdateProductRequest(StorefrontModel):
    model_config = ConfigDict(json_schema_extra={"examples": [{"price": 89.99, "stock": 45}]})

    name: str | None = Field(None, min_length=1, max_length=200)
    price: float | None = Field(None, ge=0)
    original_price: float | None = Field(None, ge=0)
    description: str | None = Field(None, max_length=1000)
    image_url: str | None = Field(None, max_length=500)
    category: str | None = Field(None, max_length=50)
    stock: int | None = Field(None, ge=0)
    rating: float | None = Field(None, ge=0, le=5)
    reviews: int | None = Field(None, ge=0)
    featured: bool | None = None
    tags: list[str] | None = None
    is_active: bool | None = None


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class AddressSchema(StorefrontModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None


class OrderLineRequest(StorefrontModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)


class PlaceOrderRequest(StorefrontModel):
    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "userId": "user-001",
                    "userEmail": "shopper@example.com",
                    "products": [{"productId": "1", "quantity": 3}],
                    "shippingAddress": {
                        "street": "1 Main St",
                        "city": "Springfield",
                        "state": "IL",
                        "zipCode": "62701",
                        "country": "US",
                    },
                    "paymentMethod": "credit_card",
                }
            ]
        }
    )

    user_id: str = Field(..., min_length=1)
    user_email: str = Field(..., min_length=3, max_length=254)
    products: list[OrderLineRequest] = Field(..., min_length=1)
    shipping_address: AddressSchema | None = None
    payment_method: str | None = Field(None, max_length=20)
    total: float | None = Field(None, ge=0)  # Accepted for compatibility, never trusted


class UpdateOrderStatusRequest(StorefrontModel):
    status: OrderStatusValue


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ProductResponse(StorefrontModel):
    id: str
    name: str
    price: float
    original_price: float | None = None
    description: str | None = None
    image_url: str | None = None
    category: str | None = None
    stock: int
    rating: float | None = None
    reviews: int | None = None
    featured: bool = False
    tags: list[str] = []
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductListResponse(StorefrontModel):
    products: list[ProductResponse]
    total: int
    total_pages: int
    current_page: int


class OrderLineResponse(StorefrontModel):
    product_id: str
    name: str
    price: float
    quantity: int
    image_url: str | None = None


class OrderResponse(StorefrontModel):
    id: str
    order_number: str
    user_id: str
    user_email: str
    products: list[OrderLineResponse]
    total: float
    status: str
    shipping_address: AddressSchema | None = None
    payment_method: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderListResponse(StorefrontModel):
    orders: list[OrderResponse]
    total: int
    total_pages: int
    current_page: int


class MessageResponse(StorefrontModel):
    message: str


class HealthResponse(StorefrontModel):
    status: str
    timestamp: datetime
    database: str
    products: int
    orders: int
