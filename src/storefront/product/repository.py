"""Repository for the Product aggregate."""

import math

from protean.exceptions import ObjectNotFoundError
from protean.utils.reflection import declared_fields

from storefront.domain import storefront
from storefront.product.product import Product
from storefront.shared.errors import ProductNotFound
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 12


@storefront.repository(part_of=Product)
class ProductRepository:
    """Read access to the catalogue plus the two stock mutations.

    ``reserve_stock`` and ``release_stock`` are the only paths through which
    the order workflow changes a product's stock.
    """

    def get_product(self, product_id) -> Product:
        """Fetch an active product; soft-deleted products count as absent."""
        product = self.get(product_id)
        if not product.is_active:
            raise ObjectNotFoundError({"product_id": [f"Product {product_id} not found"]})
        return product

    def find_sellable(self, product_id) -> Product:
        """Like ``get_product`` but reports absence as an order-line problem."""
        try:
            return self.get_product(product_id)
        except ObjectNotFoundError:
            raise ProductNotFound({"products": [f"Product {product_id} not found or inactive"]}) from None

    def reserve_stock(self, product_id, quantity):
        product = self.find_sellable(product_id)
        snapshot = product.reserve(quantity)
        self.add(product)

        logger.info(
            "stock_reserved",
            product_id=str(product_id),
            quantity=quantity,
            remaining=product.stock,
        )
        return snapshot

    def release_stock(self, product_id, quantity) -> bool:
        """Put stock back. Returns False when the product no longer exists."""
        try:
            product = self.get(product_id)
        except ObjectNotFoundError:
            logger.warning("stock_release_skipped", product_id=str(product_id), quantity=quantity)
            return False

        product.release(quantity)
        self.add(product)

        logger.info(
            "stock_released",
            product_id=str(product_id),
            quantity=quantity,
            available=product.stock,
        )
        return True

    def active_products(self) -> list[Product]:
        return self._dao.query.filter(is_active=True).all().items

    def list_products(
        self,
        page=1,
        limit=DEFAULT_PAGE_SIZE,
        category=None,
        min_price=None,
        max_price=None,
        search=None,
        featured=None,
        sort="created_at",
        order="desc",
    ) -> dict:
        """Filtered, sorted and paginated view of the active catalogue."""
        products = self.active_products()

        if category:
            products = [p for p in products if p.category == category]
        if featured is not None:
            products = [p for p in products if bool(p.featured) == featured]
        if min_price is not None:
            products = [p for p in products if p.price >= min_price]
        if max_price is not None:
            products = [p for p in products if p.price <= max_price]
        if search:
            products = [p for p in products if p.matches(search)]

        if sort not in declared_fields(Product):
            sort = "created_at"
        present = [p for p in products if getattr(p, sort) is not None]
        missing = [p for p in products if getattr(p, sort) is None]
        present.sort(key=lambda p: getattr(p, sort), reverse=order == "desc")
        products = present + missing

        total = len(products)
        start = (page - 1) * limit
        return {
            "products": products[start : start + limit],
            "total": total,
            "total_pages": math.ceil(total / limit) if limit else 0,
            "current_page": page,
        }

    def categories(self) -> list[str]:
        return sorted({p.category for p in self.active_products() if p.category})

    def count(self) -> int:
        return self._dao.query.all().total
