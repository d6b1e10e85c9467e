"""Cancelling pending orders and returning their stock."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.order.placement import total_demand
from storefront.product.product import Product
from storefront.shared.locks import stock_locks
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find_order(command.order_id)
        order.assert_cancellable()

        products = current_domain.repository_for(Product)
        returned = total_demand((str(line.product_id), line.quantity) for line in order.ordered_lines)
        skipped = [product_id for product_id, quantity in returned.items() if not products.release_stock(product_id, quantity)]

        order.cancel()
        repo.add(order)

        logger.info(
            "order_cancelled",
            order_id=str(order.id),
            order_number=order.order_number,
            skipped_products=skipped,
        )


def cancel_order(order_id) -> None:
    """Cancel a pending order while holding the stock locks of its products."""
    order = current_domain.repository_for(Order).find_order(order_id)
    with stock_locks.holding(line.product_id for line in order.lines):
        current_domain.process(CancelOrder(order_id=order_id), asynchronous=False)
