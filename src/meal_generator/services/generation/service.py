"""Generation stage: pantry request in, candidate recipes out.

The generation service is untrusted. Its output is salvaged with
``extract_json`` and validated leniently; only output with no recognizable
recipe list is rejected.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from pydantic import ValidationError

from meal_generator.llm.exceptions import LLMError
from meal_generator.llm.extraction import Parsed, extract_json
from meal_generator.llm.prompts.meal_generation import MealGenerationPrompt
from meal_generator.observability.logging import get_logger
from meal_generator.schemas.recipe import CandidateRecipe, GeneratedRecipes
from meal_generator.services.generation.exceptions import (
    GenerationFormatError,
    GenerationUnavailableError,
)


if TYPE_CHECKING:
    from meal_generator.llm.client.protocol import GenerationClientProtocol
    from meal_generator.schemas.request import EnrichmentRequest

logger = get_logger(__name__)

# Raw output is truncated to this many characters in log lines
RAW_LOG_CHARS: Final[int] = 200


class GenerationService:
    """Adapter between the pipeline and a generation client.

    Calls the client exactly once per ``generate``. Transport failures
    become ``GenerationUnavailableError``; unusable output becomes
    ``GenerationFormatError``. ``ConfigurationError`` from an unconfigured
    client passes through untouched.
    """

    def __init__(
        self,
        client: GenerationClientProtocol,
        options: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            client: Generation client.
            options: Sampling options overriding the prompt's defaults.
        """
        self._client = client
        self._prompt = MealGenerationPrompt()
        self._options = {**self._prompt.get_options(), **(options or {})}

    async def generate(self, request: EnrichmentRequest) -> list[CandidateRecipe]:
        """Generate candidate recipes for ``request``.

        Raises:
            ConfigurationError: If the client has no credentials.
            GenerationUnavailableError: If the client call fails.
            GenerationFormatError: If no recipe list can be recovered.
        """
        try:
            result = await self._client.complete(
                self._prompt.format(request=request),
                system=self._prompt.system_prompt,
                options=self._options,
            )
        except LLMError as e:
            logger.warning(
                "Generation call failed",
                prompt=self._prompt.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            msg = f"Generation request failed: {e}"
            raise GenerationUnavailableError(msg) from e

        recipes = self.parse_recipes(result.raw_response)
        logger.debug(
            "Generated candidate recipes",
            model=result.model,
            recipes=len(recipes),
            completion_tokens=result.completion_tokens,
        )
        return recipes

    def parse_recipes(self, raw_text: str | None) -> list[CandidateRecipe]:
        """Recover a recipe list from raw generation output.

        A top-level array is taken as the recipe list itself when it holds at
        least one object; an object must carry a ``recipes`` array, which may
        be empty but otherwise must hold at least one object.

        Raises:
            GenerationFormatError: If no recipe list can be recovered.
        """
        extracted = extract_json(raw_text)
        items = self._recipe_items(extracted.value) if isinstance(extracted, Parsed) else None

        if items is None:
            logger.warning(
                "Generation returned unexpected format",
                raw=(raw_text or "")[:RAW_LOG_CHARS],
            )
            msg = "Generation returned unexpected format"
            raise GenerationFormatError(msg, raw_text=raw_text)

        try:
            return GeneratedRecipes.model_validate({"recipes": items}).recipes
        except ValidationError as e:
            msg = f"Generation output does not describe recipes: {e.error_count()} errors"
            raise GenerationFormatError(msg, raw_text=raw_text) from e

    @staticmethod
    def _recipe_items(value: Any) -> list[Any] | None:
        # Salvaged prose like "see [1]" yields arrays with no recipe objects
        if isinstance(value, list):
            return value if _has_object(value) else None
        if isinstance(value, dict) and isinstance(value.get("recipes"), list):
            items = value["recipes"]
            return items if not items or _has_object(items) else None
        return None


def _has_object(items: list[Any]) -> bool:
    return any(isinstance(item, dict) for item in items)
