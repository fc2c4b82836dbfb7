import asyncio
from types import SimpleNamespace

import pytest
from azure.cosmos import exceptions

from core import queries
from core.store import RecordStore
from tests.fakes import FakeContainer, not_found


@pytest.mark.asyncio
async def test_slow_store_call_times_out(products, summaries_container):
    store = RecordStore(products, summaries_container, timeout=0.01)
    products.delay = 0.5

    with pytest.raises(asyncio.TimeoutError):
        await store.query_products(queries.select_all_query())


@pytest.mark.asyncio
async def test_no_timeout_when_disabled(products, summaries_container):
    store = RecordStore(products, summaries_container, timeout=None)
    products.delay = 0.01

    assert len(await store.query_products(queries.select_all_query())) == 4


@pytest.mark.asyncio
async def test_first_summary_returns_none_on_missing_container(store, summaries_container):
    summaries_container.fail_with = not_found("Resource Not Found")
    assert await store.first_summary(queries.summary_by_product_query("p1"), partition_key="p1") is None


@pytest.mark.asyncio
async def test_query_products_propagates_not_found(store, products):
    # Only single-record lookups treat 404 as "absent".
    products.fail_with = not_found()
    with pytest.raises(exceptions.CosmosResourceNotFoundError):
        await store.query_products(queries.select_all_query())


@pytest.mark.asyncio
async def test_delete_missing_summary_returns_false(store, summaries_container):
    assert await store.delete_summary("s-unknown", partition_key="p1") is False
    assert summaries_container.deletes == [("s-unknown", "p1")]


@pytest.mark.asyncio
async def test_upsert_then_delete(store, summaries_container):
    await store.upsert_summary({"id": "s1", "productId": "p1"})
    assert await store.delete_summary("s1", partition_key="p1") is True
    assert summaries_container.items() == []


def test_from_client_resolves_configured_containers():
    containers = {}

    class Database:
        def get_container_client(self, name):
            return containers.setdefault(name, FakeContainer())

    class Client:
        def get_database_client(self, name):
            assert name == "cosmicworks"
            return Database()

    settings = SimpleNamespace(
        database_name="cosmicworks",
        product_container="products",
        summary_container="product-summaries",
        request_timeout=12.5,
    )
    store = RecordStore.from_client(Client(), settings)

    assert store.products is containers["products"]
    assert store.summaries is containers["product-summaries"]
    assert store.timeout == 12.5
