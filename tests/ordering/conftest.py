import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture()
def shipping_address():
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "address1": "12 Analytical Way",
        "address2": "Flat 3",
        "city": "London",
        "state": "LDN",
        "zip_code": "N1 9GU",
        "country": "GB",
        "phone": "+44 20 7946 0000",
    }


@pytest.fixture()
def catalog():
    """Register products in the catalog. Returns a function taking ``(product_id, name, price, stock)``."""
    from ordering.catalog.product import CatalogProduct
    from protean import current_domain

    def _register(product_id, name, price, stock=10):
        product = CatalogProduct.register(product_id=product_id, name=name, price=price, stock=stock)
        current_domain.repository_for(CatalogProduct).add(product)
        return product

    return _register
