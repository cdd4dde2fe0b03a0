# agents/__init__.py
"""
AI Agents Package

Contains the assistant's coordinator:
- RecommendationOrchestrator: query -> candidates -> AI -> session state
"""

from .orchestrator import RecommendationOrchestrator, NoPreviousResultError, RecommendationIndexError

__all__ = [
    "RecommendationOrchestrator",
    "NoPreviousResultError",
    "RecommendationIndexError"
]
