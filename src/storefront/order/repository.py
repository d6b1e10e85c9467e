"""Repository for the Order aggregate."""

import math

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.shared.errors import OrderNotFound


@storefront.repository(part_of=Order)
class OrderRepository:
    def find_order(self, order_id) -> Order:
        try:
            return self.get(order_id)
        except ObjectNotFoundError:
            raise OrderNotFound({"order_id": [f"Order {order_id} not found"]}) from None

    def orders_for_user(self, user_id, status=None, page=1, limit=10) -> dict:
        """A customer's orders, newest first, optionally narrowed to one status."""
        query = self._dao.query.filter(user_id=user_id)
        if status:
            query = query.filter(status=status)
        return self._paginate(query, page, limit)

    def all_orders(self, status=None, page=1, limit=20) -> dict:
        """Every order, newest first, optionally narrowed to one status."""
        query = self._dao.query
        if status:
            query = query.filter(status=status)
        return self._paginate(query, page, limit)

    def count(self) -> int:
        return self._dao.query.all().total

    def _paginate(self, query, page, limit) -> dict:
        results = query.order_by("-created_at").offset((page - 1) * limit).limit(limit).all()
        return {
            "orders": results.items,
            "total": results.total,
            "total_pages": math.ceil(results.total / limit) if limit else 0,
            "current_page": page,
        }
