"""Pytest fixtures for storefront tests."""

from decimal import Decimal

import pytest

from plantshop_server.catalog_client import ALL_CATEGORIES, NetworkError
from plantshop_server.models import Category, Plant
from plantshop_server.storefront import Storefront

MANGO = Plant(
    id=1,
    name="Mango Tree",
    description="A fast-growing tropical fruit tree.",
    small_description="Sweet fruit, dense shade.",
    category="Fruit Tree",
    category_name="Fruit Tree",
    price=Decimal("500"),
    image_url="https://i.example.com/mango.jpg",
)
NEEM = Plant(
    id=2,
    name="Neem Tree",
    description="Medicinal evergreen.",
    small_description="",
    category="Medicinal Tree",
    category_name="Medicinal Tree",
    price=Decimal("45.5"),
    image_url="https://i.example.com/neem.jpg",
)
GUAVA = Plant(
    id=3,
    name="Guava Tree",
    category="Fruit Tree",
    category_name="Fruit Tree",
    price=Decimal("350"),
)

CATEGORIES = [Category(id="1", name="Fruit Tree"), Category(id="2", name="Medicinal Tree")]
PLANTS_BY_CATEGORY = {
    ALL_CATEGORIES: [MANGO, NEEM, GUAVA],
    "1": [MANGO, GUAVA],
    "2": [NEEM],
}


class FakeCatalog:
    """In-memory stand-in for CatalogClient."""

    def __init__(self, categories=None, plants=None):
        self.categories = CATEGORIES if categories is None else categories
        self.plants = PLANTS_BY_CATEGORY if plants is None else plants
        self.fail_categories = False
        self.fail_plants = False
        self.plant_requests: list[str] = []

    async def fetch_categories(self):
        if self.fail_categories:
            raise NetworkError("categories unavailable")
        return list(self.categories)

    async def fetch_plants(self, category_id=ALL_CATEGORIES):
        self.plant_requests.append(category_id)
        if self.fail_plants:
            raise NetworkError("plants unavailable")
        return list(self.plants.get(category_id, []))


@pytest.fixture
def fake_catalog():
    return FakeCatalog()


@pytest.fixture
def storefront(fake_catalog):
    """Storefront over the fake catalog, not yet loaded."""
    return Storefront(fake_catalog)
