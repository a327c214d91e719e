"""Constants for nutrition aggregation.

Contains:
- Nutrient name classification (substring to category)
- The categories carried on every nutrition total
"""

from __future__ import annotations

from typing import Final


# =============================================================================
# Nutrient Classification
# =============================================================================
# Checked in order against the lower-cased nutrient name; first match wins.
# Every matching nutrient is summed, so "Saturated Fat" adds to fat and
# "Net Carbohydrates" adds to carbs.

NUTRIENT_SUBSTRINGS: Final[tuple[tuple[str, str], ...]] = (
    ("calorie", "calories"),
    ("protein", "protein"),
    ("fat", "fat"),
    ("carb", "carbs"),
)

NUTRIENT_CATEGORIES: Final[tuple[str, ...]] = ("calories", "protein", "carbs", "fat")
