# =============================================================================
# core/queries.py  —  Cosmos DB NoSQL query construction
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Builds the query text + parameter list for every read the server issues.
#   Pure string work: no SDK imports, so it's trivially unit-testable.
#
# PARAMETERS VS. LITERALS:
#   Ids, limits and embedding vectors are always bound as @parameters.
#   Search terms are the exception: FullTextContainsAny / FullTextScore take
#   literal terms, so each token is emitted as an escaped string literal.
#
# RANKING:
#   Hybrid search hands the whole ranking to Cosmos:
#     ORDER BY RANK RRF(FullTextScore(...), FullTextScore(...), VectorDistance(...))
#   RRF (reciprocal-rank fusion) merges the three rankings by rank position,
#   not raw score, so BM25 scores and cosine distances never get compared.
# =============================================================================

import json
import string
from typing import NamedTuple, Sequence


class QuerySpec(NamedTuple):
    """A query ready for container.query_items(query=..., parameters=...)."""

    query: str
    parameters: list[dict]


# Columns returned by search queries.  The embedding is left out on purpose.
PRODUCT_PROJECTION = (
    "c.id, c.categoryId, c.categoryName, c.sku, c.name, c.description, c.price, c.tags"
)


def tokenize(text: str) -> list[str]:
    """Split search text into full-text terms.

    Whitespace-separated; leading/trailing punctuation is stripped and
    tokens left empty are discarded.  Case-insensitive duplicates keep
    their first occurrence.

    >>> tokenize("  mountain, bike!! -- Mountain ")
    ['mountain', 'bike']
    """
    tokens: list[str] = []
    seen: set[str] = set()
    for raw in (text or "").split():
        token = raw.strip(string.punctuation)
        if not token or token.lower() in seen:
            continue
        seen.add(token.lower())
        tokens.append(token)
    return tokens


def quote_literal(term: str) -> str:
    """Render a term as a double-quoted, escaped query string literal."""
    return json.dumps(term)


def _term_list(tokens: Sequence[str]) -> str:
    return ", ".join(quote_literal(t) for t in tokens)


def full_text_search_query(tokens: Sequence[str], max_results: int) -> QuerySpec:
    """Products whose description or tags contain ANY of the tokens, best match first.

    Ranked by RRF over the description and tag BM25 scores, so TOP keeps the
    best N matches rather than an arbitrary N.
    """
    if not tokens:
        raise ValueError("full-text search needs at least one token")
    terms = _term_list(tokens)
    query = (
        f"SELECT TOP @maxResults {PRODUCT_PROJECTION} "
        "FROM c "
        f"WHERE FullTextContainsAny(c.description, {terms}) "
        f"OR FullTextContainsAny(c.tags, {terms}) "
        "ORDER BY RANK RRF("
        f"FullTextScore(c.description, {terms}), "
        f"FullTextScore(c.tags, {terms}))"
    )
    return QuerySpec(query, [{"name": "@maxResults", "value": max_results}])


def hybrid_search_query(
    tokens: Sequence[str],
    vectors: Sequence[float],
    max_results: int,
) -> QuerySpec:
    """Products ranked by RRF over description score, tag score and vector distance.

    With no usable tokens there is nothing for FullTextScore to score, so
    the ranking falls back to vector distance alone.
    """
    if tokens:
        terms = _term_list(tokens)
        order_by = (
            "ORDER BY RANK RRF("
            f"FullTextScore(c.description, {terms}), "
            f"FullTextScore(c.tags, {terms}), "
            "VectorDistance(c.vectors, @vectors))"
        )
    else:
        order_by = "ORDER BY VectorDistance(c.vectors, @vectors)"

    query = f"SELECT TOP @maxResults {PRODUCT_PROJECTION} FROM c {order_by}"
    return QuerySpec(
        query,
        [
            {"name": "@maxResults", "value": max_results},
            {"name": "@vectors", "value": [float(v) for v in vectors]},
        ],
    )


def product_by_id_query(product_id: str) -> QuerySpec:
    return QuerySpec(
        "SELECT * FROM c WHERE c.id = @productId",
        [{"name": "@productId", "value": product_id}],
    )


def summary_by_product_query(product_id: str) -> QuerySpec:
    # Newest first: if duplicates exist for one product, the most recently
    # updated summary is the one returned.
    return QuerySpec(
        "SELECT * FROM c WHERE c.productId = @productId ORDER BY c.updatedAt DESC",
        [{"name": "@productId", "value": product_id}],
    )


def select_all_query() -> QuerySpec:
    return QuerySpec("SELECT * FROM c", [])
