"""API route modules."""
from .scores import router as scores_router
from .goals import router as goals_router

__all__ = [
    "scores_router",
    "goals_router",
]
