"""Generation service package.

Turns a pantry request into candidate recipes via the generation client.
"""

from __future__ import annotations

from meal_generator.services.generation.exceptions import (
    GenerationError,
    GenerationFormatError,
    GenerationUnavailableError,
)
from meal_generator.services.generation.service import GenerationService


__all__ = [
    "GenerationError",
    "GenerationFormatError",
    "GenerationService",
    "GenerationUnavailableError",
]
