# src/rjilat/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .auth import router as auth_router
from .posts import router as posts_router
from .users import router as users_router

__all__ = [
    "admin_router",
    "auth_router",
    "posts_router",
    "users_router",
]
