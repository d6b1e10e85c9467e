from storefront.api.errors import register_exception_handlers
from storefront.api.routes import health_router, order_router, product_router

__all__ = ["product_router", "order_router", "health_router", "register_exception_handlers"]
