# =============================================================================
# tools/__init__.py
# =============================================================================
# FastMCP wrappers around the core/ components.
#
# Each tool:
#   1. Calls exactly one operation on ProductSearch or SummaryManager
#   2. Converts dataclasses to dicts for JSON (embeddings stripped)
#   3. Maps "not found" preconditions to MCP tool errors
#
# Tools contain no business logic; derivation rules live in core/marketing.py.
# =============================================================================
