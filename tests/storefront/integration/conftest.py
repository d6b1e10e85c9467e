import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from storefront.api import health_router, order_router, product_router, register_exception_handlers
from storefront.product.seed import seed_sample_products


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(product_router)
    app.include_router(order_router)
    app.include_router(health_router)
    register_exception_handlers(app)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def seeded():
    """The six sample products, ids "1" to "6"."""
    seed_sample_products()


@pytest.fixture()
def checkout():
    def _body(products, **overrides):
        body = {
            "userId": "user-001",
            "userEmail": "shopper@example.com",
            "products": products,
            "shippingAddress": {"street": "1 Main St", "city": "Springfield", "zipCode": "62701", "country": "US"},
            "paymentMethod": "credit_card",
        }
        body.update(overrides)
        return body

    return _body
