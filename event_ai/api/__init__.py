# api/__init__.py
"""
API Endpoints Package

Contains the FastAPI router for the assistant:
- assistant: /api/ai/assistant (query, join, session management)
"""

from .assistant import router as assistant_router, get_session_store, set_session_store, build_session_store

__all__ = [
    "assistant_router",
    "get_session_store",
    "set_session_store",
    "build_session_store"
]
