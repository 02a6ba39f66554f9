"""Eco Admin - API Routers"""
from .dashboard import router as dashboard_router
from .users import router as users_router
from .map import router as map_router
from .logs import router as logs_router
from .admin_users import router as admin_users_router

__all__ = [
    "dashboard_router",
    "users_router",
    "map_router",
    "logs_router",
    "admin_users_router",
]
