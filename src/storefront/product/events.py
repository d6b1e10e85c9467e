"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A product was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    price = Float(required=True)
    stock = Integer(required=True)
    category = String()
    created_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductUpdated:
    """An administrator edited a product's details, price or stock."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    price = Float(required=True)
    stock = Integer(required=True)
    updated_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDeactivated:
    """A product was soft-deleted and is no longer sold."""

    __version__ = 1

    product_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)


@storefront.event(part_of="Product")
class StockReserved:
    """Stock was decremented for an order being placed."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    unit_price = Float(required=True)


@storefront.event(part_of="Product")
class StockReleased:
    """Stock was returned to the catalogue by a cancelled order."""

    __version__ = 1

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
