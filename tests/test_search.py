import pytest
from azure.cosmos import exceptions

from tests.fakes import not_found, service_unavailable


@pytest.mark.asyncio
async def test_full_text_search_matches_description_or_tags(search, products):
    results = await search.full_text_search("carbon commute", 10)

    assert {p.id for p in results} == {"p1", "p2", "p3"}
    assert all(p.vectors is None for p in results)
    assert products.queries[-1]["parameters"]["@maxResults"] == 10


@pytest.mark.asyncio
async def test_full_text_search_caps_results(search):
    results = await search.full_text_search("carbon", 1)
    assert len(results) == 1


@pytest.mark.asyncio
async def test_full_text_search_keeps_best_match_under_the_cap(search, products):
    # p1 is stored first but only matches "carbon"; p2 matches all three terms.
    results = await search.full_text_search("aero race carbon", 1)

    assert [p.id for p in results] == ["p2"]
    assert "ORDER BY RANK RRF(" in products.queries[-1]["query"]


@pytest.mark.asyncio
async def test_full_text_search_with_no_match_returns_empty(search):
    assert await search.full_text_search("mountain bike", 10) == []


@pytest.mark.asyncio
async def test_full_text_search_without_tokens_skips_the_store(search, products):
    assert await search.full_text_search(" ?! ... ", 10) == []
    assert products.queries == []


@pytest.mark.asyncio
async def test_full_text_search_uses_default_limit(store, products):
    from core.search import ProductSearch

    await ProductSearch(store, default_max_results=3).full_text_search("carbon")
    assert products.queries[-1]["parameters"]["@maxResults"] == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [0, -1, True])
async def test_invalid_limit_is_rejected(search, limit):
    with pytest.raises(ValueError):
        await search.full_text_search("carbon", limit)


@pytest.mark.asyncio
async def test_hybrid_search_sends_vector_and_terms(search, products):
    results = await search.hybrid_search("trail carbon", [0.0, 1.0, 0.0], 2)

    sent = products.queries[-1]
    assert "ORDER BY RANK RRF(" in sent["query"]
    assert sent["parameters"]["@vectors"] == [0.0, 1.0, 0.0]
    assert sent["parameters"]["@maxResults"] == 2
    assert [p.id for p in results] == ["p2", "p1"]


@pytest.mark.asyncio
async def test_hybrid_search_store_errors_propagate(search, products):
    products.fail_with = service_unavailable()
    with pytest.raises(exceptions.CosmosHttpResponseError) as excinfo:
        await search.hybrid_search("trail", [1.0, 0.0, 0.0], 5)
    assert excinfo.value.status_code == 503


@pytest.mark.asyncio
async def test_get_by_id(search):
    product = await search.get_by_id("p3")

    assert product.name == "City Bikes p3"
    assert product.vectors == [0.0, 0.0, 1.0]
    assert await search.get_by_id("missing") is None


@pytest.mark.asyncio
async def test_get_by_id_treats_store_404_as_missing(search, products):
    products.fail_with = not_found()
    assert await search.get_by_id("p1") is None


@pytest.mark.asyncio
async def test_get_by_id_propagates_other_store_errors(search, products):
    products.fail_with = service_unavailable()
    with pytest.raises(exceptions.CosmosHttpResponseError):
        await search.get_by_id("p1")


@pytest.mark.asyncio
async def test_list_all(search):
    assert sorted(p.id for p in await search.list_all()) == ["p1", "p2", "p3", "p4"]
