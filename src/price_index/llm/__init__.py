"""LLM module for the grounded price search.

This module provides the grounding service factory and the prompts sent
with every search.
"""

from src.price_index.llm.prompts import SYSTEM_INSTRUCTION, build_user_prompt
from src.price_index.llm.providers import (
    GeminiGroundingService,
    check_provider_health,
    get_grounding_service,
    to_grounding_response,
)

__all__ = [
    # Providers
    "GeminiGroundingService",
    "get_grounding_service",
    "check_provider_health",
    "to_grounding_response",
    # Prompts
    "SYSTEM_INSTRUCTION",
    "build_user_prompt",
]
