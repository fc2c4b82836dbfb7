# =============================================================================
# core/store.py  —  Record Store (Azure Cosmos DB for NoSQL, async SDK)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Owns the two container handles (products, product summaries) and runs
#   every network call against them.  The components in core/search.py and
#   core/summaries.py never touch the SDK directly.
#
# FAILURE SEMANTICS:
#   - A 404 on a point read/lookup is NOT an error here; callers get None.
#   - Everything else (throttling, 5xx, auth, connection reset) propagates.
#   - No retries.  Every call is bounded by `timeout` (asyncio.wait_for),
#     and cancelling the awaiting task cancels the in-flight request.
# =============================================================================

import asyncio
import logging
from typing import Any, Awaitable, Optional

from azure.cosmos import exceptions
from azure.cosmos.aio import ContainerProxy, CosmosClient

from core.config import Settings
from core.queries import QuerySpec

logger = logging.getLogger(__name__)


class RecordStore:
    """Thin async wrapper over the product and summary containers."""

    def __init__(
        self,
        products: ContainerProxy,
        summaries: ContainerProxy,
        timeout: Optional[float] = None,
    ):
        self.products = products
        self.summaries = summaries
        self.timeout = timeout

    @classmethod
    def from_client(cls, client: CosmosClient, settings: Settings) -> "RecordStore":
        """Resolve container handles from an open client.  No I/O happens here."""
        database = client.get_database_client(settings.database_name)
        return cls(
            products=database.get_container_client(settings.product_container),
            summaries=database.get_container_client(settings.summary_container),
            timeout=settings.request_timeout,
        )

    async def _bounded(self, awaitable: Awaitable) -> Any:
        if self.timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout=self.timeout)

    async def _query(self, container: ContainerProxy, spec: QuerySpec, **kwargs) -> list[dict]:
        logger.debug("query %s params=%s", spec.query, [p["name"] for p in spec.parameters])

        async def collect() -> list[dict]:
            items = container.query_items(query=spec.query, parameters=spec.parameters, **kwargs)
            return [item async for item in items]

        return await self._bounded(collect())

    async def _first(self, container: ContainerProxy, spec: QuerySpec, **kwargs) -> Optional[dict]:
        try:
            items = await self._query(container, spec, **kwargs)
        except exceptions.CosmosResourceNotFoundError:
            return None
        return items[0] if items else None

    # --- products (read-only) ------------------------------------------------

    async def query_products(self, spec: QuerySpec) -> list[dict]:
        return await self._query(self.products, spec)

    async def first_product(self, spec: QuerySpec) -> Optional[dict]:
        return await self._first(self.products, spec)

    # --- product summaries ---------------------------------------------------

    async def query_summaries(self, spec: QuerySpec) -> list[dict]:
        return await self._query(self.summaries, spec)

    async def first_summary(self, spec: QuerySpec, partition_key: str) -> Optional[dict]:
        return await self._first(self.summaries, spec, partition_key=partition_key)

    async def upsert_summary(self, document: dict) -> dict:
        """Create or replace a summary document; partition key is its productId."""
        return await self._bounded(self.summaries.upsert_item(body=document))

    async def delete_summary(self, summary_id: str, partition_key: str) -> bool:
        """Delete one summary.  Returns False if it was already gone."""
        try:
            await self._bounded(
                self.summaries.delete_item(item=summary_id, partition_key=partition_key)
            )
        except exceptions.CosmosResourceNotFoundError:
            logger.info("summary %s already deleted", summary_id)
            return False
        return True
