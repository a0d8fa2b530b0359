"""FastAPI routers for the HR panel."""

from .auth import router as auth_router
from .months import router as months_router
from .reports import router as reports_router
from .settings import router as settings_router

__all__ = [
    "auth_router",
    "months_router",
    "reports_router",
    "settings_router",
]
