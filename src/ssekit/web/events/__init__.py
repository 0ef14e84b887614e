"""SSE connect and push endpoints."""

from .router import router

__all__ = ["router"]
