# =============================================================================
# core/search.py  —  Search & Retrieval over Product records
# =============================================================================
#
# Read-only.  Query text goes through core/queries.py, documents come back
# through Product.from_document().  "Nothing matched" is always an empty
# list or None, never an exception.
# =============================================================================

import logging
from typing import Optional, Sequence

from core import queries
from core.models import Product
from core.store import RecordStore

logger = logging.getLogger(__name__)


def _check_limit(max_results: int) -> int:
    if isinstance(max_results, bool) or not isinstance(max_results, int) or max_results < 1:
        raise ValueError(f"max_results must be a positive integer, got {max_results!r}")
    return max_results


class ProductSearch:
    """Full-text, hybrid and point lookups against the product container."""

    def __init__(self, store: RecordStore, default_max_results: int = 10):
        self.store = store
        self.default_max_results = default_max_results

    async def full_text_search(
        self, query_text: str, max_results: Optional[int] = None
    ) -> list[Product]:
        """Products whose description or tags contain any query token.

        Returns an empty list (without querying) when the text contains no
        usable tokens.
        """
        limit = _check_limit(self.default_max_results if max_results is None else max_results)
        tokens = queries.tokenize(query_text)
        if not tokens:
            logger.info("full-text search skipped: no tokens in %r", query_text)
            return []
        docs = await self.store.query_products(queries.full_text_search_query(tokens, limit))
        return [Product.from_document(d) for d in docs]

    async def hybrid_search(
        self,
        query_text: str,
        vectors: Sequence[float],
        max_results: Optional[int] = None,
    ) -> list[Product]:
        """Products ranked by reciprocal-rank fusion of text and vector rankings.

        The embedding length is not checked here; a mismatch with the
        container's vector policy surfaces as a store error.
        """
        limit = _check_limit(self.default_max_results if max_results is None else max_results)
        tokens = queries.tokenize(query_text)
        docs = await self.store.query_products(
            queries.hybrid_search_query(tokens, vectors, limit)
        )
        return [Product.from_document(d) for d in docs]

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        doc = await self.store.first_product(queries.product_by_id_query(product_id))
        return Product.from_document(doc) if doc is not None else None

    async def list_all(self) -> list[Product]:
        # No pagination: meant for small catalogs.
        docs = await self.store.query_products(queries.select_all_query())
        return [Product.from_document(d) for d in docs]
