"""Static option catalogs."""

from .categories import (
    DEFAULT_CATEGORY,
    FREQUENCY_OPTIONS,
    HABIT_CATEGORIES,
    HABIT_TEMPLATES,
    category_label,
    category_style,
)

__all__ = [
    "DEFAULT_CATEGORY",
    "FREQUENCY_OPTIONS",
    "HABIT_CATEGORIES",
    "HABIT_TEMPLATES",
    "category_label",
    "category_style",
]
