"""Storefront FastAPI application.

Serves the product catalogue and order workflow synchronously over HTTP.
Every request runs inside the storefront domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 12001 --reload
"""

import os
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from storefront.domain import storefront
from storefront.utils.db import configure_storage, setup_db
from storefront.utils.logging import add_context, clear_context, get_logger

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The storage backend is chosen before init(): PostgreSQL when DATABASE_URL
# is reachable, the in-memory provider otherwise.
backend = configure_storage(storefront)
storefront.init()

with storefront.domain_context():
    from storefront.product.seed import seed_sample_products

    setup_db(storefront)
    seed_sample_products()

logger.info("storefront_ready", storage=backend)

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Demo e-commerce storefront: product catalogue and order placement",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context and bind a request id for logging."""
    add_context(request_id=request.headers.get("X-Request-ID", str(uuid.uuid4())), path=request.url.path)
    try:
        with storefront.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from storefront.api import (  # noqa: E402
    health_router,
    order_router,
    product_router,
    register_exception_handlers,
)

app.include_router(product_router)
app.include_router(order_router)
app.include_router(health_router)
register_exception_handlers(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "12001")))
