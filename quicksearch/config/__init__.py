"""Configuration module -- exports Settings and load_config."""

from quicksearch.config.loader import load_config
from quicksearch.config.settings import Settings

__all__ = ["Settings", "load_config"]
