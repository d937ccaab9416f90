"""HTTP surface for neo-authz.

Services include ``authz_router`` in their FastAPI application and
override ``get_authorization_engine`` with a configured engine.
"""

from .routers import authz_router, get_authorization_engine

__all__ = ["authz_router", "get_authorization_engine"]
