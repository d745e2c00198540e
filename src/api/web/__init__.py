"""
Web package.

Contains the routes that users reach from emailed links and browser forms.
"""

from src.api.web.routes import router

__all__ = ["router"]
