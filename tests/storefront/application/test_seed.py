from protean import current_domain
from storefront.product.product import Product
from storefront.product.seed import SAMPLE_PRODUCTS, seed_sample_products


def test_empty_catalogue_is_seeded():
    assert seed_sample_products() == len(SAMPLE_PRODUCTS)

    repo = current_domain.repository_for(Product)
    assert repo.count() == 6
    headphones = repo.get("1")
    assert headphones.price == 99.99
    assert headphones.stock == 50


def test_seeding_twice_adds_nothing():
    seed_sample_products()
    assert seed_sample_products() == 0
    assert current_domain.repository_for(Product).count() == 6


def test_existing_catalogue_left_alone(catalogue):
    catalogue("custom", stock=1)
    assert seed_sample_products() == 0
    assert current_domain.repository_for(Product).count() == 1
