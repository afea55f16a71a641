import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def agristore_bed():
    from agristore.domain import agristore

    bed = DomainFixture(agristore)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(agristore_bed):
    """Run every test inside the domain context and wipe stored data afterwards."""
    with agristore_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Catalogue fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def discount_codes():
    from agristore.catalog.seed import seed_discount_codes

    seed_discount_codes()


@pytest.fixture()
def fertilizer():
    """Persisted product priced 57 500 with a 50kg bag variant (+52 000)."""
    from agristore.catalog.product import Product
    from protean import current_domain

    product = Product.create(
        name="NPK 17-17-17 Fertilizer",
        price=57500,
        supplier="Yara Tanzania",
        sku="FRT-NPK-17",
        variants=[
            {"name": "bag", "value": "25kg", "price_adjustment": 0},
            {"name": "bag", "value": "50kg", "price_adjustment": 52000},
        ],
    )
    current_domain.repository_for(Product).add(product)
    return product


@pytest.fixture()
def maize_seed():
    from agristore.catalog.product import Product
    from protean import current_domain

    product = Product.create(name="Hybrid Maize Seed H614", price=18000, supplier="Kenya Seed Company")
    current_domain.repository_for(Product).add(product)
    return product
