"""
User Directory Database Layer

- UserDBPool: asyncpg connection pool manager
- UserRepository: CRUD and search operations on the users table
- UserStoreError and subclasses: closed error taxonomy for repository failures
"""

from userdir_api.db.exceptions import ErrorKind
from userdir_api.db.exceptions import InvalidUserInputError
from userdir_api.db.exceptions import UserConstraintError
from userdir_api.db.exceptions import UserNotFoundError
from userdir_api.db.exceptions import UserStoreConnectionError
from userdir_api.db.exceptions import UserStoreError
from userdir_api.db.pool import UserDBPool
from userdir_api.db.repository_user import UserRepository

__all__ = [
    "ErrorKind",
    "InvalidUserInputError",
    "UserConstraintError",
    "UserNotFoundError",
    "UserStoreConnectionError",
    "UserStoreError",
    "UserDBPool",
    "UserRepository",
]
