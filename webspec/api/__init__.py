"""
API Layer - FastAPI routes and middleware.
"""

from webspec.api.routes import health_router, interpretation_router

__all__ = [
    "health_router",
    "interpretation_router",
]
