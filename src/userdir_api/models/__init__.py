"""
User Directory Models

Pydantic models for rows of the user directory database.
"""

from userdir_api.models.user import MAX_USER_ID
from userdir_api.models.user import USER_COLUMNS
from userdir_api.models.user import UPDATABLE_FIELDS
from userdir_api.models.user import User

__all__ = [
    "MAX_USER_ID",
    "User",
    "USER_COLUMNS",
    "UPDATABLE_FIELDS",
]
