# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (explicit tool registry)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Wraps the core/ components as named MCP tools.  Each tool is a thin
#   async handler: log the request, call ONE core operation, convert the
#   result to a dict, log the response.
#
# HOW TOOLS ARE REGISTERED:
#   build_registry() returns a plain dict {tool name -> ToolSpec}.  Every
#   handler declares its argument schema with Annotated[..., Field(...)],
#   which FastMCP turns into the JSON schema the agent sees.
#   build_server() walks that dict and registers each entry by name.
#
# WIRING:
#   create_server(settings) opens nothing by itself; it builds the Cosmos
#   client, the RecordStore and both components, and hands them to the
#   handlers by closure.  The client is closed by the server lifespan.
#   Without COSMOS_DB_KEY the client authenticates with DefaultAzureCredential,
#   which the lifespan closes after the client.
#
# ERRORS:
#   NotFoundError  -> ToolError (an MCP error result naming the missing id)
#   anything else  -> logged, then re-raised for FastMCP to report
#
# LOGGING:
#   Always to STDERR: with the stdio transport, STDOUT *is* the protocol.
# =============================================================================

import json
import logging
import sys
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Annotated, Any, Awaitable, Callable, Optional

from azure.cosmos.aio import CosmosClient
from azure.identity.aio import DefaultAzureCredential
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from core.config import Settings
from core.errors import NotFoundError
from core.search import ProductSearch
from core.store import RecordStore
from core.summaries import SummaryManager

logger = logging.getLogger(__name__)

# =============================================================================
# Logging Setup
# =============================================================================
# ANSI color codes for terminal output
_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses (JSON output)
_YELLOW = "\033[33m"   # Status/progress messages
_RED = "\033[31m"      # Failures
_RESET = "\033[0m"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [MCP] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    # The Cosmos SDK logs every HTTP request at INFO.
    logging.getLogger("azure").setLevel(logging.WARNING)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: dict) -> dict:
    """Log the tool response as compact JSON in GREEN, then return it."""
    logger.info(
        f"{_GREEN}  ← {tool_name} response: "
        f"{json.dumps(result, separators=(',', ':'), default=str)}{_RESET}"
    )
    return result


async def _invoke(tool_name: str, operation: Awaitable, **params) -> Any:
    """Await one core operation with request logging, timing and error mapping."""
    _log_request(tool_name, **params)
    started = time.perf_counter()
    try:
        result = await operation
    except NotFoundError as exc:
        logger.warning(f"{_YELLOW}  ✗ {tool_name}: {exc}{_RESET}")
        raise ToolError(str(exc)) from exc
    except Exception as exc:
        logger.error(f"{_RED}  ✗ {tool_name} failed: {exc}{_RESET}", exc_info=True)
        raise
    _log_status(f"{tool_name} completed in {(time.perf_counter() - started) * 1000:.1f} ms")
    return result


# =============================================================================
# Tool registry
# =============================================================================
@dataclass(frozen=True)
class ToolSpec:
    """One externally callable operation."""

    name: str
    description: str
    handler: Callable[..., Awaitable[dict]]


ProductId = Annotated[str, Field(description="The unique identifier of the product")]


def _products_payload(products) -> dict:
    return {"count": len(products), "products": [p.to_dict() for p in products]}


def build_registry(
    search: ProductSearch,
    summaries: SummaryManager,
    default_max_results: int = 10,
    embedding_dimensions: int = 1536,
) -> dict[str, ToolSpec]:
    """Build the name -> ToolSpec mapping served by this process."""

    MaxResults = Annotated[
        int,
        Field(
            ge=1,
            description=f"Maximum number of products to return. Default value is {default_max_results}",
        ),
    ]

    # --- Search & Retrieval -------------------------------------------------

    async def hybrid_search_products(
        searchText: Annotated[str, Field(description="The search text to find products")],
        vectors: Annotated[
            list[float],
            Field(
                description=(
                    "Vector embeddings for semantic search "
                    f"({embedding_dimensions}-dimensional array)"
                )
            ),
        ],
        maxResults: MaxResults = default_max_results,
    ) -> dict:
        products = await _invoke(
            "hybrid_search_products",
            search.hybrid_search(searchText, vectors, maxResults),
            searchText=searchText,
            vectors=f"<{len(vectors)} floats>",
            maxResults=maxResults,
        )
        _log_status(f"Found {len(products)} products")
        return _log_response("hybrid_search_products", _products_payload(products))

    async def full_text_search_products(
        searchText: Annotated[str, Field(description="Keywords to match in product descriptions and tags")],
        maxResults: MaxResults = default_max_results,
    ) -> dict:
        products = await _invoke(
            "full_text_search_products",
            search.full_text_search(searchText, maxResults),
            searchText=searchText,
            maxResults=maxResults,
        )
        _log_status(f"Found {len(products)} products")
        return _log_response("full_text_search_products", _products_payload(products))

    async def get_product_by_id(productId: ProductId) -> dict:
        product = await _invoke(
            "get_product_by_id", search.get_by_id(productId), productId=productId
        )
        if product is None:
            _log_status(f"Product '{productId}' not found")
            return _log_response("get_product_by_id", {"found": False, "productId": productId})
        return _log_response("get_product_by_id", {"found": True, "product": product.to_dict()})

    async def list_products() -> dict:
        products = await _invoke("list_products", search.list_all())
        return _log_response("list_products", _products_payload(products))

    # --- Summary Management -------------------------------------------------

    async def generate_product_summary(
        productId: Annotated[str, Field(description="The product ID to generate a summary for")],
        title: Annotated[
            str,
            Field(
                description=(
                    "A catchy, marketing-focused title for the product "
                    "(e.g., 'Revolutionary Mountain Bike for Adventure Seekers')"
                )
            ),
        ],
        shortDescription: Annotated[
            str, Field(description="A brief, compelling description of the product (2-3 sentences max)")
        ],
        marketingCopy: Annotated[
            str,
            Field(
                description=(
                    "Engaging marketing copy that highlights the product's benefits "
                    "and appeals to potential customers"
                )
            ),
        ],
    ) -> dict:
        summary = await _invoke(
            "generate_product_summary",
            summaries.generate(productId, title, shortDescription, marketingCopy),
            productId=productId,
            title=title,
        )
        _log_status(f"Saved summary {summary.id}")
        return _log_response("generate_product_summary", summary.to_dict())

    async def get_product_summary(
        productId: Annotated[str, Field(description="The product ID to get the summary for")],
    ) -> dict:
        summary = await _invoke(
            "get_product_summary", summaries.get(productId), productId=productId
        )
        if summary is None:
            _log_status(f"No summary for product '{productId}'")
            return _log_response("get_product_summary", {"found": False, "productId": productId})
        return _log_response("get_product_summary", {"found": True, "summary": summary.to_dict()})

    async def update_product_summary(
        productId: Annotated[str, Field(description="The product ID to update the summary for")],
        title: Annotated[str, Field(description="Updated catchy, marketing-focused title for the product")],
        shortDescription: Annotated[str, Field(description="Updated brief, compelling description of the product")],
        marketingCopy: Annotated[str, Field(description="Updated engaging marketing copy")],
    ) -> dict:
        summary = await _invoke(
            "update_product_summary",
            summaries.update(productId, title, shortDescription, marketingCopy),
            productId=productId,
            title=title,
        )
        return _log_response("update_product_summary", summary.to_dict())

    async def delete_product_summary(
        productId: Annotated[str, Field(description="The product ID to delete the summary for")],
    ) -> dict:
        deleted = await _invoke(
            "delete_product_summary", summaries.delete(productId), productId=productId
        )
        if not deleted:
            _log_status(f"No summary for product '{productId}'")
        return _log_response("delete_product_summary", {"productId": productId, "deleted": deleted})

    async def list_product_summaries() -> dict:
        items = await _invoke("list_product_summaries", summaries.list_all())
        return _log_response(
            "list_product_summaries",
            {"count": len(items), "summaries": [s.to_dict() for s in items]},
        )

    specs = [
        ToolSpec(
            "hybrid_search_products",
            "Search for products using hybrid search (combines full-text and vector "
            "similarity). Use this when you want products that are conceptually similar "
            "to the search terms, even if they don't contain the exact keywords. "
            "Requires the embedding of the search text.",
            hybrid_search_products,
        ),
        ToolSpec(
            "full_text_search_products",
            "Search for products whose description or tags contain any of the given "
            "keywords. Returns an empty list when nothing matches.",
            full_text_search_products,
        ),
        ToolSpec("get_product_by_id", "Get a specific product by its ID", get_product_by_id),
        ToolSpec(
            "list_products",
            "List every product in the catalog (small catalogs only, no paging)",
            list_products,
        ),
        ToolSpec(
            "generate_product_summary",
            "Generate and save a marketing summary for a product. Provide the creative "
            "content (title, short description, marketing copy); the tool derives the use "
            "case, key features and target audience from the product data and saves the "
            "complete summary.",
            generate_product_summary,
        ),
        ToolSpec(
            "get_product_summary",
            "Retrieve a previously generated product summary by product ID",
            get_product_summary,
        ),
        ToolSpec(
            "update_product_summary",
            "Update an existing product summary with new marketing content. Derived "
            "fields are recomputed from the current product data.",
            update_product_summary,
        ),
        ToolSpec("delete_product_summary", "Delete a product summary", delete_product_summary),
        ToolSpec(
            "list_product_summaries",
            "Get all product summaries in the database",
            list_product_summaries,
        ),
    ]
    return {spec.name: spec for spec in specs}


# =============================================================================
# Server construction
# =============================================================================
INSTRUCTIONS = (
    "Product catalog tools. Search products (hybrid or keyword), look them up by "
    "ID, and manage marketing summaries for them."
)


def build_server(
    registry: dict[str, ToolSpec],
    name: str = "products-mcp-server",
    lifespan: Optional[Callable] = None,
) -> FastMCP:
    """Create a FastMCP server exposing every entry of the registry."""
    kwargs = {"instructions": INSTRUCTIONS}
    if lifespan is not None:
        kwargs["lifespan"] = lifespan
    mcp = FastMCP(name, **kwargs)

    for spec in registry.values():
        mcp.tool(name=spec.name, description=spec.description)(spec.handler)

    @mcp.custom_route("/api/healthz", methods=["GET"])
    async def healthz(request: Request) -> PlainTextResponse:
        return PlainTextResponse("Healthy")

    return mcp


def _cosmos_credential(settings: Settings):
    """Account key when one is configured, otherwise Entra ID."""
    if settings.cosmos_key:
        logger.info("Authenticating to Cosmos DB with the account key")
        return settings.cosmos_key
    logger.info("COSMOS_DB_KEY not set; authenticating to Cosmos DB with DefaultAzureCredential")
    return DefaultAzureCredential()


def create_server(settings: Settings) -> FastMCP:
    """Wire Cosmos client -> RecordStore -> components -> tools."""
    credential = _cosmos_credential(settings)
    client = CosmosClient(settings.cosmos_endpoint, credential=credential)
    store = RecordStore.from_client(client, settings)
    search = ProductSearch(store, default_max_results=settings.product_max_results)
    summaries = SummaryManager(store, search)

    @asynccontextmanager
    async def cosmos_lifespan(server: FastMCP):
        try:
            async with client:
                logger.info(
                    "Connected to Cosmos DB database '%s' (products='%s', summaries='%s')",
                    settings.database_name,
                    settings.product_container,
                    settings.summary_container,
                )
                yield
        finally:
            if not isinstance(credential, str):
                await credential.close()
        logger.info("Cosmos DB client closed")

    registry = build_registry(
        search,
        summaries,
        default_max_results=settings.product_max_results,
        embedding_dimensions=settings.embedding_dimensions,
    )
    logger.info("Registering %d MCP tools: %s", len(registry), ", ".join(registry))
    return build_server(registry, name=settings.server_name, lifespan=cosmos_lifespan)


def run(settings: Settings) -> None:
    """Build the server and block serving on the configured transport."""
    mcp = create_server(settings)
    if settings.transport == "http":
        mcp.run(transport="http", host=settings.host, port=settings.port)
    else:
        mcp.run()
