# =============================================================================
# core/models.py  —  Data Models (Product & ProductSummary)
# =============================================================================
#
# These dataclasses define the shape of the two record kinds stored in
# Cosmos DB.  Stored documents use camelCase keys; the dataclasses use
# snake_case.  The from_document()/to_document() pair is the ONLY place
# that knows about the difference.
#
# WHAT GOES OVER THE WIRE:
#   to_dict() is what the MCP tools return.  For a Product that excludes
#   the 1536-float embedding; the agent never needs it back.
# =============================================================================

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Serialize a datetime as a fixed-width ISO-8601 UTC string.

    Fixed width (always microseconds, always +00:00) keeps lexicographic
    order equal to chronological order inside the store.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


_FRACTION = re.compile(r"\.(\d+)")


def parse_timestamp(value: Any) -> datetime:
    """Parse a stored timestamp back into an aware UTC datetime.

    Accepts a trailing "Z" and fractional seconds of any precision
    (.NET writers emit seven digits).
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# -----------------------------------------------------------------------------
# Product — a catalog item (read-only from this server's point of view)
# -----------------------------------------------------------------------------
@dataclass
class Product:
    """A catalog item as stored in the product container."""

    id: str
    category_id: str
    category_name: str
    sku: str
    name: str
    description: str
    price: float
    tags: list[str] = field(default_factory=list)
    vectors: Optional[list[float]] = None   # absent until the item is indexed

    @classmethod
    def from_document(cls, doc: dict) -> "Product":
        """Build a Product from a Cosmos document (system keys ignored)."""
        vectors = doc.get("vectors")
        return cls(
            id=doc["id"],
            category_id=doc.get("categoryId") or "",
            category_name=doc.get("categoryName") or "",
            sku=doc.get("sku") or "",
            name=doc.get("name") or "",
            description=doc.get("description") or "",
            price=float(doc.get("price") or 0.0),
            tags=list(doc.get("tags") or []),
            vectors=list(vectors) if vectors is not None else None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "categoryId": self.category_id,
            "categoryName": self.category_name,
            "sku": self.sku,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "tags": list(self.tags),
        }


# -----------------------------------------------------------------------------
# ProductSummary — a marketing summary tied to one product
# -----------------------------------------------------------------------------
# title / short_description / marketing_copy come from the caller (the LLM
# writes them).  key_features / target_audience / use_case are derived from
# the product by core/marketing.py.  product_id is a lookup key AND the
# partition key of the summary container.
# -----------------------------------------------------------------------------
@dataclass
class ProductSummary:
    """A generated marketing summary for one product."""

    id: str
    product_id: str
    title: str
    short_description: str
    marketing_copy: str
    key_features: list[str] = field(default_factory=list)
    target_audience: list[str] = field(default_factory=list)
    use_case: str = ""
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_document(cls, doc: dict) -> "ProductSummary":
        return cls(
            id=doc["id"],
            product_id=doc["productId"],
            title=doc.get("title") or "",
            short_description=doc.get("shortDescription") or "",
            marketing_copy=doc.get("marketingCopy") or "",
            key_features=list(doc.get("keyFeatures") or []),
            target_audience=list(doc.get("targetAudience") or []),
            use_case=doc.get("useCase") or "",
            created_at=parse_timestamp(doc["createdAt"]),
            updated_at=parse_timestamp(doc["updatedAt"]),
        )

    def to_document(self) -> dict:
        """The JSON body upserted into the summary container."""
        return {
            "id": self.id,
            "productId": self.product_id,
            "title": self.title,
            "shortDescription": self.short_description,
            "marketingCopy": self.marketing_copy,
            "keyFeatures": list(self.key_features),
            "targetAudience": list(self.target_audience),
            "useCase": self.use_case,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }

    def to_dict(self) -> dict:
        # Same shape as the stored document; kept separate so callers don't
        # depend on storage details.
        return self.to_document()
