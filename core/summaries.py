# =============================================================================
# core/summaries.py  —  ProductSummary lifecycle
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   generate / get / update / delete / list for marketing summaries.
#   generate and update also READ the product (through ProductSearch) so the
#   derived fields in core/marketing.py reflect current product data.
#
# ONE SUMMARY PER PRODUCT?
#   That's the intended usage, but the container doesn't enforce it.  When
#   duplicates exist, get() returns the most recently updated one (the
#   query sorts by updatedAt DESC), and update()/delete() act on that same
#   record.
#
# PRECONDITIONS:
#   generate  -> product must exist            (ProductNotFoundError)
#   update    -> summary must exist            (SummaryNotFoundError)
#                and the product must exist    (ProductNotFoundError)
#   delete    -> none; returns False when there was nothing to delete
# =============================================================================

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from core import marketing, queries
from core.errors import ProductNotFoundError, SummaryNotFoundError
from core.models import Product, ProductSummary, utc_now
from core.search import ProductSearch
from core.store import RecordStore

logger = logging.getLogger(__name__)


def _new_summary_id() -> str:
    return str(uuid.uuid4())


class SummaryManager:
    """Creates, reads, updates, deletes and lists product summaries."""

    def __init__(
        self,
        store: RecordStore,
        search: ProductSearch,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = _new_summary_id,
    ):
        self.store = store
        self.search = search
        self.clock = clock
        self.id_factory = id_factory

    async def _require_product(self, product_id: str) -> Product:
        product = await self.search.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def generate(
        self,
        product_id: str,
        title: str,
        short_description: str,
        marketing_copy: str,
    ) -> ProductSummary:
        """Create and persist a new summary for an existing product.

        Raises:
            ProductNotFoundError: the product doesn't exist.  Nothing is written.
        """
        product = await self._require_product(product_id)

        now = self.clock()
        summary = ProductSummary(
            id=self.id_factory(),
            product_id=product_id,
            title=title,
            short_description=short_description,
            marketing_copy=marketing_copy,
            key_features=marketing.extract_key_features(product),
            target_audience=marketing.determine_target_audience(product),
            use_case=marketing.generate_use_case(product),
            created_at=now,
            updated_at=now,
        )
        await self.store.upsert_summary(summary.to_document())
        logger.info("created summary %s for product %s", summary.id, product_id)
        return summary

    async def get(self, product_id: str) -> Optional[ProductSummary]:
        doc = await self.store.first_summary(
            queries.summary_by_product_query(product_id), partition_key=product_id
        )
        return ProductSummary.from_document(doc) if doc is not None else None

    async def update(
        self,
        product_id: str,
        title: str,
        short_description: str,
        marketing_copy: str,
    ) -> ProductSummary:
        """Overwrite the creative fields and recompute the derived ones.

        id and created_at are kept; updated_at never moves backwards.
        """
        existing = await self.get(product_id)
        if existing is None:
            raise SummaryNotFoundError(product_id)
        product = await self._require_product(product_id)

        updated = replace(
            existing,
            title=title,
            short_description=short_description,
            marketing_copy=marketing_copy,
            key_features=marketing.extract_key_features(product),
            target_audience=marketing.determine_target_audience(product),
            use_case=marketing.generate_use_case(product),
            updated_at=max(self.clock(), existing.updated_at),
        )
        await self.store.upsert_summary(updated.to_document())
        logger.info("updated summary %s for product %s", updated.id, product_id)
        return updated

    async def delete(self, product_id: str) -> bool:
        """Delete the product's summary.  Returns False if there was none."""
        existing = await self.get(product_id)
        if existing is None:
            logger.info("no summary to delete for product %s", product_id)
            return False
        return await self.store.delete_summary(existing.id, partition_key=existing.product_id)

    async def list_all(self) -> list[ProductSummary]:
        docs = await self.store.query_summaries(queries.select_all_query())
        return [ProductSummary.from_document(d) for d in docs]
