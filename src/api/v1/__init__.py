"""
API v1 package.

Contains versioned JSON authentication routes.
"""

from src.api.v1.routes import router

__all__ = ["router"]
