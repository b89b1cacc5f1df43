"""Route modules."""

from .admin import router as admin_router
from .comments import router as comments_router
from .posts import router as posts_router
from .users import router as users_router

__all__ = ["admin_router", "comments_router", "posts_router", "users_router"]
