"""
AI Assistant Configuration
Loads settings from environment variables and wires assistant components
"""

import os
from typing import List, Optional, TYPE_CHECKING
from dotenv import load_dotenv

if TYPE_CHECKING:
    from .agents.orchestrator import RecommendationOrchestrator
    from .interfaces.event_store import EventStore
    from .llm.recommender import RecommendationService

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment"""

    # OpenAI Configuration
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    OPENAI_TEMPERATURE: float = float(os.getenv("OPENAI_TEMPERATURE", "0.7"))
    OPENAI_MAX_TOKENS: int = int(os.getenv("OPENAI_MAX_TOKENS", "500"))

    # Feature flags
    AI_ASSISTANT_ENABLED: bool = _env_bool("AI_ASSISTANT_ENABLED", "true")
    AI_USE_DISTANCE: bool = _env_bool("AI_USE_DISTANCE", "true")

    # Candidate selection
    AI_MAX_CANDIDATES: int = int(os.getenv("AI_MAX_CANDIDATES", "30"))
    AI_MAX_DISTANCE_KM: float = float(os.getenv("AI_MAX_DISTANCE_KM", "20.0"))
    AI_RESPONSE_LANGUAGE: str = os.getenv("AI_RESPONSE_LANGUAGE", "en")

    # Sessions
    SESSION_TTL_HOURS: int = int(os.getenv("SESSION_TTL_HOURS", "24"))

    # API Configuration
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    API_ENV: str = os.getenv("API_ENV", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS Configuration
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001")

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def use_openai(self) -> bool:
        """True when a usable OpenAI key is configured"""
        return bool(self.OPENAI_API_KEY) and not self.OPENAI_API_KEY.startswith("sk-your")


# Global settings instance
settings = Settings()


# ============================================
# Factories
# ============================================

def provide_recommendation_service(enabled: Optional[bool] = None) -> "RecommendationService":
    """
    Provide the reasoning service based on the feature flag.

    Args:
        enabled: Override for AI_ASSISTANT_ENABLED

    Returns:
        OpenAI-backed service when enabled, otherwise the deterministic fake
    """
    from .llm.recommender import FakeRecommendationService, OpenAIRecommendationService

    if enabled is None:
        enabled = settings.AI_ASSISTANT_ENABLED

    if enabled:
        return OpenAIRecommendationService(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_MODEL,
            temperature=settings.OPENAI_TEMPERATURE,
            max_tokens=settings.OPENAI_MAX_TOKENS,
        )
    return FakeRecommendationService()


def create_orchestrator(
    recommendation_service: "RecommendationService",
    event_store: "EventStore",
    use_distance_calculation: Optional[bool] = None,
    max_candidates: Optional[int] = None,
    max_distance_km: Optional[float] = None,
) -> "RecommendationOrchestrator":
    """
    Create a RecommendationOrchestrator with its candidate selector.

    Args:
        recommendation_service: Reasoning service (OpenAI or fake)
        event_store: Event store used for retrieval and joins
        use_distance_calculation: Whether to filter/sort by distance (default from settings)
        max_candidates: Candidate cap (default from settings)
        max_distance_km: Distance cutoff (default from settings)
    """
    from .agents.orchestrator import RecommendationOrchestrator
    from .algorithms.candidate_selector import CandidateSelector
    from .algorithms.distance import HaversineDistanceCalculator

    if use_distance_calculation is None:
        use_distance_calculation = settings.AI_USE_DISTANCE

    distance_calculator = HaversineDistanceCalculator() if use_distance_calculation else None

    candidate_selector = CandidateSelector(
        distance_calculator=distance_calculator,
        max_candidates=settings.AI_MAX_CANDIDATES if max_candidates is None else max_candidates,
        max_distance_km=settings.AI_MAX_DISTANCE_KM if max_distance_km is None else max_distance_km,
    )

    return RecommendationOrchestrator(
        recommendation_service=recommendation_service,
        event_store=event_store,
        candidate_selector=candidate_selector,
        response_language=settings.AI_RESPONSE_LANGUAGE,
    )
