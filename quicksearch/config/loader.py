"""YAML configuration loader with environment variable overrides.

Configuration is layered (later layers win):

    1. config/config.yaml  -- static defaults checked into the repo
    2. .env file           -- local developer overrides
    3. Environment vars    -- deploy-time values

``load_config`` reads the YAML file first, then deep-merges the
Settings-derived values on top.
"""

from pathlib import Path

import yaml

from quicksearch.config.settings import Settings


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.  A missing file is
              treated as empty.
        settings: Optional pre-built Settings; a fresh instance is read from
                  the environment when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    if settings is None:
        settings = Settings()
    env_overrides = {
        "app": {
            "env": settings.app_env,
        },
        "suggestions": {
            "min_query_length": settings.suggestion_min_query_length,
            "debounce_ms": settings.suggestion_debounce_ms,
            "result_limit": settings.suggestion_result_limit,
            "cache_ttl_s": settings.suggestion_cache_ttl_s,
            "cache_size": settings.suggestion_cache_size,
        },
        "hints": {
            "default_duration_ms": settings.hint_default_duration_ms,
            "map_duration_ms": settings.map_hint_duration_ms,
        },
        "trend_store": {
            "url": settings.trend_store_url,
            "timeout_s": settings.trend_store_timeout_s,
            "remote": settings.uses_remote_store(),
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
