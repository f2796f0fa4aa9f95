"""Home-screen view modes that drive the map status hint."""

from __future__ import annotations

from enum import Enum


class ViewMode(str, Enum):
    """How listings are laid out on the home screen."""

    GRID = "grid"
    LIST = "list"
    MAP = "map"
