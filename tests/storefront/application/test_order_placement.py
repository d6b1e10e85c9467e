import threading

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder, place_order, requested_lines, total_demand
from storefront.product.management import update_product
from storefront.product.product import Product
from storefront.shared.errors import InsufficientStock, ProductNotFound


def _place(products, **overrides):
    defaults = {
        "user_id": "user-001",
        "user_email": "shopper@example.com",
        "products": products,
    }
    defaults.update(overrides)
    return place_order(**defaults)


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).stock


def _order_count():
    return current_domain.repository_for(Order).count()


class TestCartDecoding:
    def test_requested_lines(self):
        command = PlaceOrder(
            user_id="user-001",
            user_email="shopper@example.com",
            products='[{"product_id": 1, "quantity": "2"}]',
        )
        assert requested_lines(command) == [("1", 2)]

    def test_total_demand_sums_repeated_products(self):
        assert total_demand([("1", 2), ("2", 1), ("1", 3)]) == {"1": 5, "2": 1}

    def test_total_demand_keeps_first_appearance_order(self):
        assert list(total_demand([("2", 1), ("1", 1), ("2", 1)])) == ["2", "1"]


class TestSuccessfulPlacement:
    def test_reserves_stock_and_persists_order(self, catalogue):
        catalogue("1", stock=50, price=99.99, name="Wireless Headphones")

        order_id = _place([{"product_id": "1", "quantity": 3}])

        assert _stock("1") == 47
        order = current_domain.repository_for(Order).get(order_id)
        assert order.total == 299.97
        assert order.status == "pending"
        assert order.user_email.address == "shopper@example.com"

    def test_lines_follow_request_order(self, catalogue):
        catalogue("1", stock=10, price=99.99)
        catalogue("6", stock=10, price=49.99)

        order_id = _place(
            [
                {"product_id": "6", "quantity": 1},
                {"product_id": "1", "quantity": 2},
            ]
        )

        order = current_domain.repository_for(Order).get(order_id)
        assert [(line.product_id, line.quantity) for line in order.ordered_lines] == [("6", 1), ("1", 2)]
        assert order.total == 249.97

    def test_repeated_product_consumes_combined_quantity(self, catalogue):
        catalogue("1", stock=10)

        _place(
            [
                {"product_id": "1", "quantity": 4},
                {"product_id": "1", "quantity": 3},
            ]
        )

        assert _stock("1") == 3

    def test_client_total_is_ignored(self, catalogue):
        catalogue("1", stock=10, price=20.0)

        order_id = _place([{"product_id": "1", "quantity": 2}])

        assert current_domain.repository_for(Order).get(order_id).total == 40.0

    def test_shipping_address_and_payment_method(self, catalogue):
        catalogue("1", stock=10)

        order_id = _place(
            [{"product_id": "1", "quantity": 1}],
            shipping_address={"street": "1 Main St", "city": "Springfield", "zip_code": "62701"},
            payment_method="paypal",
        )

        order = current_domain.repository_for(Order).get(order_id)
        assert order.shipping_address.zip_code == "62701"
        assert order.payment_method == "paypal"

    def test_reserving_entire_stock(self, catalogue):
        catalogue("1", stock=2)
        _place([{"product_id": "1", "quantity": 2}])
        assert _stock("1") == 0

    def test_price_snapshot_survives_catalogue_edit(self, catalogue):
        catalogue("1", stock=10, price=99.99, name="Wireless Headphones")
        order_id = _place([{"product_id": "1", "quantity": 1}])

        update_product("1", price=149.99, name="Headphones Pro")

        line = current_domain.repository_for(Order).get(order_id).ordered_lines[0]
        assert line.price == 99.99
        assert line.name == "Wireless Headphones"


class TestRejectedPlacement:
    def test_insufficient_stock_changes_nothing(self, catalogue):
        catalogue("1", stock=5, name="Wireless Headphones")

        with pytest.raises(InsufficientStock) as exc:
            _place([{"product_id": "1", "quantity": 10}])

        assert "Insufficient stock for Wireless Headphones. Available: 5" in exc.value.messages["products"]
        assert _stock("1") == 5
        assert _order_count() == 0

    def test_failing_later_line_leaves_earlier_products_untouched(self, catalogue):
        catalogue("1", stock=10)
        catalogue("2", stock=10)
        catalogue("3", stock=1)

        with pytest.raises(InsufficientStock):
            _place(
                [
                    {"product_id": "1", "quantity": 2},
                    {"product_id": "2", "quantity": 2},
                    {"product_id": "3", "quantity": 5},
                ]
            )

        assert _stock("1") == 10
        assert _stock("2") == 10
        assert _stock("3") == 1
        assert _order_count() == 0

    def test_repeated_lines_checked_against_combined_quantity(self, catalogue):
        catalogue("1", stock=5)

        with pytest.raises(InsufficientStock):
            _place(
                [
                    {"product_id": "1", "quantity": 3},
                    {"product_id": "1", "quantity": 3},
                ]
            )

        assert _stock("1") == 5

    def test_unknown_product(self, catalogue):
        catalogue("1", stock=10)

        with pytest.raises(ProductNotFound) as exc:
            _place(
                [
                    {"product_id": "1", "quantity": 1},
                    {"product_id": "missing", "quantity": 1},
                ]
            )

        assert "Product missing not found or inactive" in exc.value.messages["products"]
        assert _stock("1") == 10

    def test_deactivated_product(self, catalogue):
        product = catalogue("1", stock=10)
        product.deactivate()
        current_domain.repository_for(Product).add(product)

        with pytest.raises(ProductNotFound):
            _place([{"product_id": "1", "quantity": 1}])

    def test_invalid_email(self, catalogue):
        catalogue("1", stock=10)

        with pytest.raises(ValidationError):
            _place([{"product_id": "1", "quantity": 1}], user_email="nobody")

        assert _stock("1") == 10
        assert _order_count() == 0

    def test_empty_cart(self):
        with pytest.raises(ValidationError):
            _place([])


class TestConcurrentPlacement:
    def test_parallel_orders_never_oversell(self, catalogue):
        from storefront.domain import storefront

        catalogue("1", stock=5, price=10.0)
        shoppers = 12
        start = threading.Barrier(shoppers, timeout=10)
        placed, rejected, unexpected = [], [], []

        def buy(index):
            with storefront.domain_context():
                start.wait()
                try:
                    placed.append(
                        place_order(
                            user_id=f"user-{index}",
                            user_email="shopper@example.com",
                            products=[{"product_id": "1", "quantity": 1}],
                        )
                    )
                except InsufficientStock as exc:
                    rejected.append(exc)
                except Exception as exc:  # noqa: BLE001
                    unexpected.append(exc)

        threads = [threading.Thread(target=buy, args=(index,)) for index in range(shoppers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert unexpected == []
        assert len(placed) == 5
        assert len(set(placed)) == 5
        assert len(rejected) == shoppers - 5
        assert _stock("1") == 0
        assert _order_count() == 5
