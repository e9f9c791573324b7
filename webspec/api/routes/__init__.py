"""
API Routes - FastAPI route modules.
"""

from webspec.api.routes.health import router as health_router
from webspec.api.routes.interpretation import router as interpretation_router

__all__ = [
    "health_router",
    "interpretation_router",
]
