"""
LLM Components Package

Contains the reasoning step of the assistant:
- prompts: Prompt templates for the recommendation call
- recommender: OpenAI-backed and fake recommendation services
"""

from .recommender import (
    RecommendationService,
    RecommendationServiceError,
    OpenAIRecommendationService,
    FakeRecommendationService,
    parse_response_content,
    format_events_for_prompt
)

__all__ = [
    "RecommendationService",
    "RecommendationServiceError",
    "OpenAIRecommendationService",
    "FakeRecommendationService",
    "parse_response_content",
    "format_events_for_prompt"
]
