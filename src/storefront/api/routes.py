"""FastAPI routes for the Storefront domain: products, orders and health.

Thin adapters that translate HTTP requests into domain commands and
repository queries. Stock and pricing rules live in the domain.
"""

import json
from datetime import UTC, datetime

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AddressSchema,
    CreateProductRequest,
    HealthResponse,
    MessageResponse,
    OrderLineResponse,
    OrderListResponse,
    OrderResponse,
    PlaceOrderRequest,
    ProductListResponse,
    ProductResponse,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
)
from storefront.order.cancellation import cancel_order as cancel_pending_order
from storefront.order.order import Order
from storefront.order.placement import place_order as place_customer_order
from storefront.order.status import UpdateOrderStatus
from storefront.product.management import CreateProduct, DeactivateProduct, update_product as apply_product_update
from storefront.product.product import Product
from storefront.utils.db import storage_backend

product_router = APIRouter(prefix="/products", tags=["products"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
health_router = APIRouter(tags=["health"])


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------
def product_response(product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        price=product.price,
        original_price=product.original_price,
        description=product.description,
        image_url=product.image_url,
        category=product.category,
        stock=product.stock,
        rating=product.rating,
        reviews=product.reviews,
        featured=bool(product.featured),
        tags=product.tag_list,
        is_active=bool(product.is_active),
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def order_response(order) -> OrderResponse:
    address = order.shipping_address
    return OrderResponse(
        id=str(order.id),
        order_number=order.order_number,
        user_id=str(order.user_id),
        user_email=order.user_email.address,
        products=[
            OrderLineResponse(
                product_id=str(line.product_id),
                name=line.name,
                price=line.price,
                quantity=line.quantity,
                image_url=line.image_url,
            )
            for line in order.ordered_lines
        ],
        total=order.total,
        status=order.status,
        shipping_address=(
            AddressSchema(
                street=address.street,
                city=address.city,
                state=address.state,
                zip_code=address.zip_code,
                country=address.country,
            )
            if address
            else None
        ),
        payment_method=order.payment_method,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def order_list_response(page) -> OrderListResponse:
    return OrderListResponse(
        orders=[order_response(order) for order in page["orders"]],
        total=page["total"],
        total_pages=page["total_pages"],
        current_page=page["current_page"],
    )


# ---------------------------------------------------------------------------
# Product endpoints
# ---------------------------------------------------------------------------
@product_router.get("", response_model=ProductListResponse)
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    category: str | None = None,
    min_price: float | None = Query(None, alias="minPrice", ge=0),
    max_price: float | None = Query(None, alias="maxPrice", ge=0),
    search: str | None = None,
    sort: str = "created_at",
    order: str = Query("desc", pattern="^(asc|desc)$"),
    featured: bool | None = None,
) -> ProductListResponse:
    result = current_domain.repository_for(Product).list_products(
        page=page,
        limit=limit,
        category=category,
        min_price=min_price,
        max_price=max_price,
        search=search,
        featured=featured,
        sort=sort,
        order=order,
    )
    return ProductListResponse(
        products=[product_response(product) for product in result["products"]],
        total=result["total"],
        total_pages=result["total_pages"],
        current_page=result["current_page"],
    )


@product_router.get("/meta/categories", response_model=list[str])
async def list_categories() -> list[str]:
    return current_domain.repository_for(Product).categories()


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product).get_product(product_id)
    return product_response(product)


@product_router.post("", status_code=201, response_model=ProductResponse)
async def create_product(body: CreateProductRequest) -> ProductResponse:
    command = CreateProduct(
        product_id=body.id,
        name=body.name,
        price=body.price,
        original_price=body.original_price,
        description=body.description,
        image_url=body.image_url,
        category=body.category,
        stock=body.stock,
        rating=body.rating,
        reviews=body.reviews,
        featured=body.featured,
        tags=json.dumps(body.tags) if body.tags is not None else None,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return product_response(current_domain.repository_for(Product).get(product_id))


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> ProductResponse:
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "tags" in changes:
        changes["tags"] = json.dumps(changes["tags"])

    apply_product_update(product_id, **changes)
    return product_response(current_domain.repository_for(Product).get(product_id))


@product_router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(product_id: str) -> MessageResponse:
    current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)
    return MessageResponse(message="Product deleted successfully")


# ---------------------------------------------------------------------------
# Order endpoints
# ---------------------------------------------------------------------------
@order_router.get("", response_model=OrderListResponse)
async def list_orders(
    user_id: str | None = Query(None, alias="userId"),
    status: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> OrderListResponse:
    repo = current_domain.repository_for(Order)
    if user_id:
        return order_list_response(repo.orders_for_user(user_id, status=status, page=page, limit=limit))
    return order_list_response(repo.all_orders(status=status, page=page, limit=limit))


@order_router.get("/user/{user_id}", response_model=OrderListResponse)
async def list_user_orders(
    user_id: str,
    status: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> OrderListResponse:
    repo = current_domain.repository_for(Order)
    return order_list_response(repo.orders_for_user(user_id, status=status, page=page, limit=limit))


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return order_response(current_domain.repository_for(Order).find_order(order_id))


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest) -> OrderResponse:
    order_id = place_customer_order(
        user_id=body.user_id,
        user_email=body.user_email,
        products=[{"product_id": line.product_id, "quantity": line.quantity} for line in body.products],
        shipping_address=body.shipping_address.model_dump() if body.shipping_address else None,
        payment_method=body.payment_method,
    )
    return order_response(current_domain.repository_for(Order).find_order(order_id))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderResponse:
    current_domain.process(UpdateOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    return order_response(current_domain.repository_for(Order).find_order(order_id))


@order_router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: str) -> OrderResponse:
    cancel_pending_order(order_id)
    return order_response(current_domain.repository_for(Order).find_order(order_id))


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@health_router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(UTC),
        database=storage_backend(current_domain),
        products=current_domain.repository_for(Product).count(),
        orders=current_domain.repository_for(Order).count(),
    )
