"""Product aggregate, the source of truth for price and stock."""

import json
from datetime import datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    Identifier,
    Integer,
    String,
    Text,
)

from storefront.domain import storefront
from storefront.shared.errors import InsufficientStock, ProductNotFound


class ProductCategory(Enum):
    ELECTRONICS = "Electronics"
    FASHION = "Fashion"
    HOME = "Home"
    SPORTS = "Sports"
    BOOKS = "Books"
    BEAUTY = "Beauty"
    FURNITURE = "Furniture"


# Fields an administrator may change through UpdateProduct
EDITABLE_FIELDS = (
    "name",
    "price",
    "original_price",
    "description",
    "image_url",
    "category",
    "stock",
    "rating",
    "reviews",
    "featured",
    "tags",
    "is_active",
)


@storefront.value_object
class ProductSnapshot:
    """Name, price and image of a product as they were when stock was reserved.

    Order lines are built from snapshots so that later catalogue edits never
    rewrite historical orders.
    """

    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    price = Float(required=True, min_value=0.0)
    image_url = String(max_length=500)


@storefront.aggregate
class Product:
    name = String(required=True, max_length=200)
    price = Float(required=True, min_value=0.0)
    original_price = Float(min_value=0.0)
    description = String(max_length=1000)
    image_url = String(max_length=500)
    category = String(choices=ProductCategory)
    stock = Integer(required=True, min_value=0)
    rating = Float(min_value=0.0, max_value=5.0, default=0.0)
    reviews = Integer(min_value=0, default=0)
    featured = Boolean(default=False)
    tags = Text()  # JSON: list of strings
    is_active = Boolean(default=True)
    created_at = DateTime(default=datetime.now)
    updated_at = DateTime(default=datetime.now)

    @classmethod
    def create(cls, name, price, stock, product_id=None, tags=None, **details):
        from storefront.product.events import ProductCreated

        now = datetime.now()
        attributes = {"created_at": now, "updated_at": now, **details}
        attributes.update(name=name, price=price, stock=stock, tags=_encode_tags(tags))
        if product_id is not None:
            attributes["id"] = str(product_id)

        product = cls(**attributes)
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                price=product.price,
                stock=product.stock,
                category=product.category,
                created_at=product.created_at,
            )
        )
        return product

    @property
    def tag_list(self):
        return json.loads(self.tags) if self.tags else []

    def matches(self, term):
        """Case-insensitive match of ``term`` against name, description and tags."""
        needle = term.lower()
        haystack = [self.name or "", self.description or "", *self.tag_list]
        return any(needle in value.lower() for value in haystack)

    def update(self, **changes):
        from storefront.product.events import ProductUpdated

        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in sorted(unknown)})

        for field, value in changes.items():
            if field == "tags":
                value = _encode_tags(value)
            setattr(self, field, value)

        now = datetime.now()
        self.updated_at = now

        self.raise_(
            ProductUpdated(
                product_id=self.id,
                name=self.name,
                price=self.price,
                stock=self.stock,
                updated_at=now,
            )
        )

    def deactivate(self):
        from storefront.product.events import ProductDeactivated

        self.is_active = False
        now = datetime.now()
        self.updated_at = now

        self.raise_(ProductDeactivated(product_id=self.id, deactivated_at=now))

    def ensure_available(self, quantity):
        """Raise unless ``quantity`` units of this product can be sold right now."""
        if not self.is_active:
            raise ProductNotFound({"products": [f"Product {self.id} not found or inactive"]})

        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        if quantity > self.stock:
            raise InsufficientStock({"products": [f"Insufficient stock for {self.name}. Available: {self.stock}"]})

    def reserve(self, quantity):
        """Take ``quantity`` units out of stock and return the pre-reservation snapshot."""
        from storefront.product.events import StockReserved

        self.ensure_available(quantity)

        snapshot = ProductSnapshot(
            product_id=self.id,
            name=self.name,
            price=self.price,
            image_url=self.image_url,
        )

        previous_stock = self.stock
        self.stock = previous_stock - quantity
        self.updated_at = datetime.now()

        self.raise_(
            StockReserved(
                product_id=self.id,
                quantity=quantity,
                previous_stock=previous_stock,
                new_stock=self.stock,
                unit_price=snapshot.price,
            )
        )
        return snapshot

    def release(self, quantity):
        """Return ``quantity`` units to stock. There is no upper bound."""
        from storefront.product.events import StockReleased

        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        previous_stock = self.stock
        self.stock = previous_stock + quantity
        self.updated_at = datetime.now()

        self.raise_(
            StockReleased(
                product_id=self.id,
                quantity=quantity,
                previous_stock=previous_stock,
                new_stock=self.stock,
            )
        )


def _encode_tags(tags):
    if tags is None or isinstance(tags, str):
        return tags
    return json.dumps([str(tag).strip() for tag in tags])
