# =============================================================================
# core/__init__.py
# =============================================================================
# Domain models, configuration and data access for the products server.
#
# Nothing in this package imports FastMCP.  The Cosmos SDK is confined to
# core/store.py; everything else works against RecordStore and plain
# dataclasses, so search and summary logic can be exercised with a fake
# container.
# =============================================================================
