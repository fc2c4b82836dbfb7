from datetime import datetime, timedelta, timezone

import pytest

from core.search import ProductSearch
from core.store import RecordStore
from core.summaries import SummaryManager
from tests.fakes import FakeContainer


def product_doc(id, category_name, price, tags, description="", vectors=None):
    doc = {
        "id": id,
        "categoryId": f"cat-{category_name.lower().replace(' ', '-')}",
        "categoryName": category_name,
        "sku": f"SKU-{id.upper()}",
        "name": f"{category_name} {id}",
        "description": description,
        "price": price,
        "tags": tags,
        "_rid": "abc==",
        "_etag": '"00000000-0000"',
        "_ts": 1735689600,
    }
    if vectors is not None:
        doc["vectors"] = vectors
    return doc


CATALOG = [
    product_doc(
        "p1", "Mountain Bikes", 1200.0, ["trail", "carbon", "22-speed"],
        "Full suspension carbon frame for steep descents.", [1.0, 0.0, 0.0],
    ),
    product_doc(
        "p2", "Road Bikes", 1000.0, ["aero", "lightweight", "race", "carbon"],
        "Aero frame tuned for racing.", [0.0, 1.0, 0.0],
    ),
    product_doc(
        "p3", "City Bikes", 500.0, ["commuter", "basket"],
        "Upright comfort for the daily commute.", [0.0, 0.0, 1.0],
    ),
    product_doc("p4", "Helmets", 49.99, ["safety", "safety", "visor"], "Vented helmet."),
]


class FakeClock:
    """Returns a strictly increasing series of UTC datetimes."""

    def __init__(self, start=datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc), step=timedelta(seconds=1)):
        self.current = start
        self.step = step

    def __call__(self):
        value = self.current
        self.current += self.step
        return value


@pytest.fixture
def products():
    return FakeContainer(partition_key_field="id", items=CATALOG)


@pytest.fixture
def summaries_container():
    return FakeContainer(partition_key_field="productId")


@pytest.fixture
def store(products, summaries_container):
    return RecordStore(products, summaries_container, timeout=5.0)


@pytest.fixture
def search(store):
    return ProductSearch(store, default_max_results=10)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager(store, search, clock):
    return SummaryManager(store, search, clock=clock)
