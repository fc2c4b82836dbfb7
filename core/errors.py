# =============================================================================
# core/errors.py  —  Error taxonomy
# =============================================================================
#
# Only "not found" gets its own type.  Store failures (Cosmos HTTP errors,
# timeouts, connection errors) propagate as whatever the SDK raised.
# =============================================================================


class NotFoundError(LookupError):
    """A record required by an operation does not exist."""

    def __init__(self, kind: str, product_id: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.product_id = product_id


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: str):
        super().__init__("product", product_id, f"Product with ID '{product_id}' not found.")


class SummaryNotFoundError(NotFoundError):
    def __init__(self, product_id: str):
        super().__init__(
            "summary", product_id, f"Product summary for ID '{product_id}' not found."
        )
