"""FastAPI dependencies for accessing app state."""

from fastapi import Depends
from fastapi import Request

from userdir_api.db.pool import UserDBPool
from userdir_api.db.repository_user import UserRepository
from userdir_api.settings import Settings


def get_settings(request: Request) -> Settings:
    """
    Get application settings from request state.

    Parameters
    ----------
    request : Request
        FastAPI request object

    Returns
    -------
    Settings
        Application settings instance
    """
    return request.app.state.settings


def get_user_db_pool(request: Request) -> UserDBPool:
    """
    Get the user directory connection pool from app state.

    The pool is created in create_app() and initialized on startup.
    """
    return request.app.state.user_db_pool


def get_user_repository(pool: UserDBPool = Depends(get_user_db_pool)) -> UserRepository:
    """Build a UserRepository over the application pool."""
    return UserRepository(pool)
