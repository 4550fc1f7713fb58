"""
Weekly template for the default (non-personalized) program.

Each weekday maps to a display label and the catalog categories sampled for
it. Days that contain any of SPECIAL_CATEGORIES are sampled as a flat pick
per category; all other days are split into compound and accessory picks.
"""

from __future__ import annotations

WEEKLY_WORKOUT_PLAN: dict[str, dict] = {
    "Monday": {"label": "Chest & Triceps", "categories": ["Chest", "Arms"]},
    "Tuesday": {"label": "Back & Biceps", "categories": ["Back", "Arms"]},
    "Wednesday": {"label": "Legs & Shoulders", "categories": ["Legs", "Shoulders"]},
    "Thursday": {"label": "Core & Functional", "categories": ["Core", "Cardio"]},
    "Friday": {"label": "Full-Body", "categories": ["Full Body"]},
}

WEEKDAY_ORDER: tuple[str, ...] = tuple(WEEKLY_WORKOUT_PLAN)

SPECIAL_CATEGORIES: frozenset[str] = frozenset({"Core", "Cardio", "Full Body"})

# Rows sampled per category on a special day
special_day_sample_size: int = 6

# Rows sampled per category and type on a split day
split_day_compound_count: int = 2
split_day_accessory_count: int = 2


def is_special_day(categories: list[str]) -> bool:
    """True when the day is sampled without a compound/accessory split."""
    return any(category in SPECIAL_CATEGORIES for category in categories)
