import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    """Run each test inside the domain context and start from empty stores."""
    with storefront_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()


@pytest.fixture()
def catalogue():
    """Factory that stores products directly through the repository."""
    from protean import current_domain
    from storefront.product.product import Product

    def _add(product_id, stock, price=10.0, name=None, **details):
        product = Product.create(
            product_id=product_id,
            name=name or f"Product {product_id}",
            price=price,
            stock=stock,
            **details,
        )
        current_domain.repository_for(Product).add(product)
        return product

    return _add
