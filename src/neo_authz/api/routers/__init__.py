"""Authorization routers."""

from .authz_router import router as authz_router
from .dependencies import get_authorization_engine

__all__ = ["authz_router", "get_authorization_engine"]
