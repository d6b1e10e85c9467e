"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A cart was turned into a pending order and its stock reserved."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    lines = Text(required=True)  # JSON: list of {product_id, name, price, quantity}
    line_count = Integer(required=True)
    total = Float(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """An administrator moved the order to another status."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    """A pending order was cancelled and its stock returned to the catalogue."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    cancelled_at = DateTime(required=True)
