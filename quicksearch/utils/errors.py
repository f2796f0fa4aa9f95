"""Custom exception hierarchy for quicksearch.

All application exceptions inherit from :class:`QuickSearchError`, which
carries an optional ``provider_name`` so error handlers can identify which
store adapter (e.g. "rest_trend_store", "memory_event_store") caused the
failure.

    QuickSearchError  (base -- catch-all for any quicksearch error)
    +-- StoreError            (adapter-level transport / query failure)
    |   +-- StoreFetchError   (suggestion prefix query failed)
    |   +-- StoreRecordError  (selection-tracking write failed)
    +-- ConfigurationError    (invalid controller options or settings)

Store adapters raise plain :class:`StoreError`.  The controllers wrap it in
the operation-specific subclass before reporting, so a diagnostic sink can
tell a failed fetch from a failed analytics write.
"""

from __future__ import annotations


class QuickSearchError(Exception):
    """Base exception for all quicksearch errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[rest_trend_store] HTTP 503``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Store errors
# ---------------------------------------------------------------------------

class StoreError(QuickSearchError):
    """Raised by a store adapter when a query or write cannot be completed."""

    default_message = "Store operation failed"

    def __init__(self, message: str | None = None, provider_name: str | None = None) -> None:
        super().__init__(message=message or self.default_message, provider_name=provider_name)

    @classmethod
    def wrap(cls, exc: BaseException) -> StoreError:
        """Re-raise-ready instance of *cls* for *exc*, chained via ``__cause__``.

        Message and provider are carried over from another quicksearch error;
        anything else contributes its text (or its type name when it has none).
        """
        if isinstance(exc, cls):
            return exc
        if isinstance(exc, QuickSearchError):
            err = cls(exc.message, provider_name=exc.provider_name)
        else:
            err = cls(str(exc) or type(exc).__name__)
        err.__cause__ = exc
        return err


class StoreFetchError(StoreError):
    """A suggestion prefix query failed.

    Never propagated out of :class:`SuggestionController`; it is handed to
    the diagnostic sink instead.
    """

    default_message = "Suggestion fetch failed"


class StoreRecordError(StoreError):
    """The selection-tracking write failed.  Always swallowed."""

    default_message = "Selection record failed"


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(QuickSearchError):
    """Raised when controller options or settings are invalid."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
