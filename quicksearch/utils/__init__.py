"""Utility modules for quicksearch.

- **errors** -- Exception hierarchy rooted at QuickSearchError; store
  adapters raise StoreError and the controllers narrow it to StoreFetchError
  or StoreRecordError before reporting.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

# -- Domain exception hierarchy --------------------------------------------
from quicksearch.utils.errors import (
    ConfigurationError,
    QuickSearchError,
    StoreError,
    StoreFetchError,
    StoreRecordError,
)

# -- Structured logging setup ----------------------------------------------
from quicksearch.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "QuickSearchError",
    "StoreError",
    "StoreFetchError",
    "StoreRecordError",
    "configure_logging",
    "get_logger",
]
