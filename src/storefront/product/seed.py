"""Demo catalogue loaded when the store starts empty."""

from protean.utils.globals import current_domain

from storefront.product.product import Product
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SAMPLE_PRODUCTS = [
    {
        "product_id": "1",
        "name": "Wireless Headphones",
        "price": 99.99,
        "description": "High-quality wireless headphones with noise cancellation",
        "image_url": "https://via.placeholder.com/200x200?text=Headphones",
        "category": "Electronics",
        "stock": 50,
        "featured": True,
        "tags": ["audio", "wireless"],
    },
    {
        "product_id": "2",
        "name": "Smartphone",
        "price": 699.99,
        "description": "Latest smartphone with advanced features",
        "image_url": "https://via.placeholder.com/200x200?text=Smartphone",
        "category": "Electronics",
        "stock": 30,
        "featured": True,
        "tags": ["mobile"],
    },
    {
        "product_id": "3",
        "name": "Laptop",
        "price": 1299.99,
        "description": "Powerful laptop for work and gaming",
        "image_url": "https://via.placeholder.com/200x200?text=Laptop",
        "category": "Electronics",
        "stock": 20,
        "tags": ["computer", "gaming"],
    },
    {
        "product_id": "4",
        "name": "Smart Watch",
        "price": 299.99,
        "description": "Fitness tracking smartwatch",
        "image_url": "https://via.placeholder.com/200x200?text=Watch",
        "category": "Sports",
        "stock": 40,
        "tags": ["fitness", "wearable"],
    },
    {
        "product_id": "5",
        "name": "Bluetooth Speaker",
        "price": 79.99,
        "description": "Portable Bluetooth speaker with excellent sound quality",
        "image_url": "https://via.placeholder.com/200x200?text=Speaker",
        "category": "Electronics",
        "stock": 60,
        "tags": ["audio", "portable"],
    },
    {
        "product_id": "6",
        "name": "Gaming Mouse",
        "price": 49.99,
        "description": "High-precision gaming mouse with RGB lighting",
        "image_url": "https://via.placeholder.com/200x200?text=Mouse",
        "category": "Electronics",
        "stock": 75,
        "tags": ["gaming", "accessories"],
    },
]


def seed_sample_products() -> int:
    """Add the sample products when the catalogue is empty. Returns how many were added."""
    repo = current_domain.repository_for(Product)
    if repo.count() > 0:
        return 0

    for data in SAMPLE_PRODUCTS:
        repo.add(Product.create(**data))

    logger.info("catalogue_seeded", products=len(SAMPLE_PRODUCTS))
    return len(SAMPLE_PRODUCTS)
