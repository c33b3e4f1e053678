"""Shopping domain API package."""

from shopping.api.routes import session_router

__all__ = ["session_router"]
