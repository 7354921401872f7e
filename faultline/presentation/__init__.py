"""Presentation layer - API and user interfaces"""

from .api import api_router
from .web import router as web_router

__all__ = ["api_router", "web_router"]
