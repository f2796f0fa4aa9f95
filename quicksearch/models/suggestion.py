"""Suggestion models and controller option schemas.

All models are Pydantic v2 with frozen config, so a snapshot handed to a
listener cannot be mutated behind the controller's back.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from quicksearch.utils.errors import ConfigurationError


# ---------------------------------------------------------------------------
# Suggestion -- one ranked row from the trend store.
# ---------------------------------------------------------------------------
class Suggestion(BaseModel):
    """A single ranked suggestion as returned by the suggestion store.

    ``weight`` is the store's ranking signal (the ``search_count`` column of
    the trend table).  The controller never re-sorts, so equal weights keep
    whatever order the store returned them in.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    weight: float = 0.0


# ---------------------------------------------------------------------------
# SuggestionState -- immutable snapshot of the controller's visible state.
# ---------------------------------------------------------------------------
class SuggestionState(BaseModel):
    """What a renderer needs to draw the search box and suggestion panel."""

    model_config = ConfigDict(frozen=True)

    query: str = ""
    suggestions: tuple[Suggestion, ...] = ()
    visible: bool = False
    loading: bool = False


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------
class SuggestionOptions(BaseModel):
    """Construction options for :class:`SuggestionController`.

    ``identity`` is the signed-in user id; selections are only recorded
    when it is set.
    """

    model_config = ConfigDict(frozen=True)

    identity: str | None = None
    min_query_length: int = Field(default=2, ge=0)
    debounce_ms: int = Field(default=300, ge=0)
    result_limit: int = Field(default=5, ge=1)


class TransientFlagOptions(BaseModel):
    """Construction options for :class:`TransientFlagTimer`."""

    model_config = ConfigDict(frozen=True)

    default_duration_ms: int = Field(default=3000, ge=0)


_OptionsT = TypeVar("_OptionsT", SuggestionOptions, TransientFlagOptions)


def coerce_options(
    model: type[_OptionsT],
    options: _OptionsT | Mapping[str, Any] | None,
) -> _OptionsT:
    """Validate *options* into *model*, raising ConfigurationError on bad input."""
    if options is None:
        return model()
    if isinstance(options, model):
        return options
    try:
        return model.model_validate(dict(options))
    except (TypeError, ValueError) as exc:
        # pydantic.ValidationError subclasses ValueError.
        raise ConfigurationError(f"Invalid {model.__name__}: {exc}") from exc
