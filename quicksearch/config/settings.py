"""Application settings loaded from environment variables via pydantic-settings.

Values are read from environment variables first and from a ``.env`` file
in the working directory second; the field name ``suggestion_debounce_ms``
maps to the env var ``SUGGESTION_DEBOUNCE_MS``.  Defaults below apply when
neither source sets a value.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """quicksearch settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Suggestion controller ===
    suggestion_min_query_length: int = 2
    suggestion_debounce_ms: int = 300
    suggestion_result_limit: int = 5
    # 0 disables the TTL cache in front of the suggestion store.
    suggestion_cache_ttl_s: int = 60
    suggestion_cache_size: int = 256

    # === Transient hints ===
    hint_default_duration_ms: int = 3000
    map_hint_duration_ms: int = 2000

    # === Trend store ===
    # Empty URL = use the in-process memory stores.
    trend_store_url: str = ""
    trend_store_api_key: str = ""
    trend_store_timeout_s: float = 10.0

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    def uses_remote_store(self) -> bool:
        """Return ``True`` when a remote trend store endpoint is configured."""
        return bool(self.trend_store_url.strip())
