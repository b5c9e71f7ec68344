"""API Routes for GroupScope."""

from .groups_router import router as groups_router
from .records_router import activities_router, customers_router
from .users_router import router as users_router

__all__ = [
    "activities_router",
    "customers_router",
    "groups_router",
    "users_router",
]
