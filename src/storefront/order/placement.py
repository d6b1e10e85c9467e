"""Placing orders against the catalogue.

Every line is checked against the catalogue before any stock moves, so a
cart that fails on its third line leaves the first two products untouched.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.product.product import Product
from storefront.shared.email import EmailAddress
from storefront.shared.locks import stock_locks
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    user_email = String(required=True, max_length=254)
    products = Text(required=True)  # JSON: list of {product_id, quantity}
    shipping_address = Text()  # JSON: address dict
    payment_method = String(max_length=20)


def requested_lines(command):
    """Decode the command's cart into ``(product_id, quantity)`` pairs."""
    items = json.loads(command.products) if isinstance(command.products, str) else command.products
    return [(str(item["product_id"]), int(item["quantity"])) for item in items]


def total_demand(lines):
    """Sum quantities per product, keeping first-appearance order."""
    demand = {}
    for product_id, quantity in lines:
        demand[product_id] = demand.get(product_id, 0) + quantity
    return demand


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = requested_lines(command)
        demand = total_demand(lines)
        EmailAddress(address=command.user_email)
        products = current_domain.repository_for(Product)

        for product_id, quantity in demand.items():
            products.find_sellable(product_id).ensure_available(quantity)

        snapshots = {product_id: products.reserve_stock(product_id, quantity) for product_id, quantity in demand.items()}

        shipping_address = json.loads(command.shipping_address) if command.shipping_address else None
        order = Order.place(
            user_id=command.user_id,
            user_email=command.user_email,
            reservations=[(snapshots[product_id], quantity) for product_id, quantity in lines],
            shipping_address=shipping_address,
            payment_method=command.payment_method,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order.order_number,
            user_id=str(command.user_id),
            lines=len(lines),
            total=order.total,
        )
        return str(order.id)


def place_order(user_id, user_email, products, shipping_address=None, payment_method=None) -> str:
    """Place an order while holding the stock locks of every product in the cart.

    ``products`` is a list of ``{"product_id": ..., "quantity": ...}`` dicts.
    Returns the new order's identifier.
    """
    command = PlaceOrder(
        user_id=user_id,
        user_email=user_email,
        products=json.dumps(products),
        shipping_address=json.dumps(shipping_address) if shipping_address else None,
        payment_method=payment_method,
    )
    with stock_locks.holding(item["product_id"] for item in products):
        return current_domain.process(command, asynchronous=False)
