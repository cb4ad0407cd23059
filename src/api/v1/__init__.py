"""
API v1 package.

Contains versioned API routes for account registration and activation.
"""

from src.api.v1.routes import router

__all__ = ["router"]
