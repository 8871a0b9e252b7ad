"""
API module - FastAPI routers and endpoint definitions.

Route handlers stay thin: they resolve the AuthContext and call one
service function each.

Usage:
    from app.api import api_router
    app.include_router(api_router)
"""

from app.api.routes import api_router

__all__ = ["api_router"]
