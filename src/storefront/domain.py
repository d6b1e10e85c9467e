"""Storefront bounded context: Product Catalogue and Order Placement.

Handles the product catalogue (stock-bearing products with soft delete) and
the order workflow that reserves stock, snapshots prices and releases stock
again when a pending order is cancelled.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")
