"""Order aggregate: a placed cart with price snapshots and a status.

Status values:
    pending → processing → shipped → delivered   (forward by convention)
    pending → cancelled                           (enforced: only pending orders cancel)

``delivered`` and ``cancelled`` are terminal. Status updates accept any member
of the enumeration; only cancellation checks the current status, because it
also returns stock to the catalogue.
"""

import json
import random
import string
import time
from datetime import datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from storefront.domain import storefront
from storefront.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged
from storefront.shared.email import EmailAddress
from storefront.shared.errors import InvalidState


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    STRIPE = "stripe"


TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


def generate_order_number():
    """Human-readable order reference, e.g. ``ORD-1718000000000-K3X9Q``."""
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=5))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"


def money(amount):
    return round(amount, 2)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, as entered at checkout."""

    street = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    zip_code = String(max_length=20)
    country = String(max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderLine:
    """One requested product with the name and price captured at placement.

    ``position`` keeps the lines in the order the customer listed them.
    """

    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    image_url = String(max_length=500)
    position = Integer(default=0)

    @property
    def subtotal(self):
        return self.price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=40)
    user_id = Identifier(required=True)
    user_email = ValueObject(EmailAddress, required=True)
    lines = HasMany(OrderLine)
    total = Float(required=True, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    shipping_address = ValueObject(ShippingAddress)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.CREDIT_CARD.value)
    created_at = DateTime(default=datetime.now)
    updated_at = DateTime(default=datetime.now)

    @invariant.post
    def total_must_equal_sum_of_lines(self):
        if not self.lines:
            return
        expected = money(sum(line.subtotal for line in self.lines))
        if abs(self.total - expected) > 0.005:
            raise ValidationError({"total": [f"Total {self.total} does not match order lines ({expected})"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, user_email, reservations, shipping_address=None, payment_method=None):
        """Build a pending order from reserved stock.

        Args:
            user_id: Opaque identifier of the customer.
            user_email: Contact address; validated as an EmailAddress.
            reservations: Sequence of ``(ProductSnapshot, quantity)`` pairs in
                the order the customer listed them.
            shipping_address: Optional dict with street, city, state,
                zip_code, country.
            payment_method: One of PaymentMethod; defaults to credit card.
        """
        if not reservations:
            raise ValidationError({"products": ["An order needs at least one product"]})

        lines = [
            OrderLine(
                product_id=snapshot.product_id,
                name=snapshot.name,
                price=snapshot.price,
                quantity=quantity,
                image_url=snapshot.image_url,
                position=position,
            )
            for position, (snapshot, quantity) in enumerate(reservations)
        ]
        total = money(sum(line.subtotal for line in lines))
        now = datetime.now()

        order = cls(
            order_number=generate_order_number(),
            user_id=user_id,
            user_email=EmailAddress(address=user_email),
            lines=lines,
            total=total,
            shipping_address=ShippingAddress(**shipping_address) if shipping_address else None,
            payment_method=payment_method or PaymentMethod.CREDIT_CARD.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                user_id=str(user_id),
                lines=json.dumps(
                    [
                        {
                            "product_id": str(line.product_id),
                            "name": line.name,
                            "price": line.price,
                            "quantity": line.quantity,
                        }
                        for line in lines
                    ]
                ),
                line_count=len(lines),
                total=total,
                placed_at=now,
            )
        )
        return order

    @property
    def ordered_lines(self):
        return sorted(self.lines or [], key=lambda line: line.position or 0)

    @property
    def is_terminal(self):
        return OrderStatus(self.status) in TERMINAL_STATUSES

    # -------------------------------------------------------------------
    # Status changes
    # -------------------------------------------------------------------
    def update_status(self, new_status):
        """Move to any status of the enumeration; transitions are not checked."""
        if new_status not in {s.value for s in OrderStatus}:
            raise ValidationError({"status": [f"Invalid status: {new_status}"]})

        previous_status = self.status
        self.status = new_status
        now = datetime.now()
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=new_status,
                changed_at=now,
            )
        )

    def assert_cancellable(self):
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise InvalidState({"status": ["Only pending orders can be cancelled"]})

    def cancel(self):
        self.assert_cancellable()

        self.status = OrderStatus.CANCELLED.value
        now = datetime.now()
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                cancelled_at=now,
            )
        )
