"""Catalogue administration."""

import json

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import EDITABLE_FIELDS, Product
from storefront.shared.locks import stock_locks
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    product_id = Identifier()  # Optional; generated when absent
    name = String(required=True, max_length=200)
    price = Float(required=True, min_value=0.0)
    original_price = Float(min_value=0.0)
    description = String(max_length=1000)
    image_url = String(max_length=500)
    category = String(max_length=50)
    stock = Integer(required=True, min_value=0)
    rating = Float(min_value=0.0, max_value=5.0)
    reviews = Integer(min_value=0)
    featured = Boolean(default=False)
    tags = Text()  # JSON: list of strings


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    name = String(max_length=200)
    price = Float(min_value=0.0)
    original_price = Float(min_value=0.0)
    description = String(max_length=1000)
    image_url = String(max_length=500)
    category = String(max_length=50)
    stock = Integer(min_value=0)
    rating = Float(min_value=0.0, max_value=5.0)
    reviews = Integer(min_value=0)
    featured = Boolean()
    tags = Text()  # JSON: list of strings
    is_active = Boolean()


@storefront.command(part_of="Product")
class DeactivateProduct:
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageCatalogueHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        details = {
            field: getattr(command, field)
            for field in ("original_price", "description", "image_url", "category", "rating", "reviews")
            if getattr(command, field) is not None
        }
        product = Product.create(
            product_id=command.product_id,
            name=command.name,
            price=command.price,
            stock=command.stock,
            featured=bool(command.featured),
            tags=json.loads(command.tags) if command.tags else None,
            **details,
        )
        current_domain.repository_for(Product).add(product)

        logger.info("product_created", product_id=str(product.id), stock=product.stock)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        changes = {field: getattr(command, field) for field in EDITABLE_FIELDS if getattr(command, field) is not None}
        if "tags" in changes:
            changes["tags"] = json.loads(changes["tags"])

        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update(**changes)
        repo.add(product)

        logger.info("product_updated", product_id=str(product.id), fields=sorted(changes))

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)

        logger.info("product_deactivated", product_id=str(product.id))


def update_product(product_id, **changes):
    """Apply an administrative edit while holding the product's stock lock."""
    with stock_locks.holding([product_id]):
        current_domain.process(UpdateProduct(product_id=product_id, **changes), asynchronous=False)
