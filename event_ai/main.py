"""
Event Recommendation Assistant - FastAPI Application
LLM Provider:
- If AI_ASSISTANT_ENABLED and OPENAI_API_KEY is set: use OpenAI
- Otherwise: deterministic fake recommender
"""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .api.assistant import build_session_store, get_session_store, router as assistant_router, set_session_store
from .config import settings
from .schemas.ai_schemas import HealthResponse

# Configure logging
logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL)


def _llm_provider() -> str:
    if settings.AI_ASSISTANT_ENABLED and settings.use_openai:
        return "openai"
    if settings.AI_ASSISTANT_ENABLED:
        return "openai (no API key)"
    return "fake"


# ============================================
# Application Lifespan
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    logger.info("=" * 50)
    logger.info("Starting Event Recommendation Assistant")
    logger.info("=" * 50)
    logger.info(f"Environment: {settings.API_ENV}")
    logger.info(f"LLM Provider: {_llm_provider()}")
    logger.info(f"  Model: {settings.OPENAI_MODEL}")
    logger.info(
        f"Candidates: max={settings.AI_MAX_CANDIDATES}, "
        f"max_distance_km={settings.AI_MAX_DISTANCE_KM}, distance={settings.AI_USE_DISTANCE}"
    )

    set_session_store(build_session_store())

    yield

    set_session_store(None)
    logger.info("Assistant shutdown complete")


# ============================================
# FastAPI Application
# ============================================

app = FastAPI(
    title="Event Recommendation Assistant",
    description="Turns free-text queries into AI-reasoned event recommendations with follow-up actions.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(assistant_router)


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check"""
    store = get_session_store()
    store.purge_expired()
    return HealthResponse(
        status="healthy",
        llm_provider=_llm_provider(),
        llm_model=settings.OPENAI_MODEL,
        active_sessions=len(store),
    )


# ============================================
# Main
# ============================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "event_ai.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_ENV == "development"
    )
