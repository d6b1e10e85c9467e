"""Order status updates."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order, OrderStatus
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)


@storefront.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find_order(command.order_id)
        previous_status = order.status
        order.update_status(command.status)
        repo.add(order)

        logger.info(
            "order_status_changed",
            order_id=str(order.id),
            previous_status=previous_status,
            new_status=order.status,
        )
