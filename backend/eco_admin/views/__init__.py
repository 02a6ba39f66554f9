"""Eco Admin - Dashboard Views"""
from .base import EntityView
from .users import UsersView
from .logs import LogsView
from .map import MapView
from .admin_users import AdminUsersView
from .navigation import build_navigation

__all__ = [
    "EntityView",
    "UsersView",
    "LogsView",
    "MapView",
    "AdminUsersView",
    "build_navigation",
]
