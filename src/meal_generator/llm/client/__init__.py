"""Generation client implementations."""

from meal_generator.llm.client.mock import MOCK_RECIPES, MockGenerationClient
from meal_generator.llm.client.openai import OpenAIClient
from meal_generator.llm.client.protocol import GenerationClientProtocol
from meal_generator.llm.client.unconfigured import UnconfiguredGenerationClient


__all__ = [
    "MOCK_RECIPES",
    "GenerationClientProtocol",
    "MockGenerationClient",
    "OpenAIClient",
    "UnconfiguredGenerationClient",
]
