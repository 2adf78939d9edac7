"""Configuration helpers for sport position rules and runtime settings."""

from .positions import (
    DEFAULT_RULES,
    PositionRules,
    SportPositionRules,
    get_rules,
    is_valid_position,
    iter_rules,
)
from .settings import Settings, load_settings

__all__ = [
    "DEFAULT_RULES",
    "PositionRules",
    "Settings",
    "SportPositionRules",
    "get_rules",
    "is_valid_position",
    "iter_rules",
    "load_settings",
]
