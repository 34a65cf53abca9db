"""
User Entity Model

Database model for rows of the users table.
Rows are decoded by column name; the SELECT list in db/queries.py is built from
this model's field order, so the two cannot drift apart.
"""

from datetime import datetime
from typing import Any
from typing import Mapping
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict


class User(BaseModel):
    """User database model."""

    user_id: Optional[int] = None  # generated by the store on insert
    name_id: str
    identity_provider: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    photo_url: Optional[str] = None
    email_address: Optional[str] = None
    phone_country_code: Optional[int] = None
    phone_number: Optional[int] = None

    # Audit columns
    date_created: Optional[datetime] = None
    created_by: Optional[str] = None
    date_modified: Optional[datetime] = None
    modified_by: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "User":
        """Decode an asyncpg Record (or any mapping) by column name."""
        return cls.model_validate(dict(record))


# Column order of every user SELECT
USER_COLUMNS = tuple(User.model_fields)

# Fields written by UPDATE, in bind order ($1..$6; name_id is $7)
UPDATABLE_FIELDS = (
    "first_name",
    "last_name",
    "photo_url",
    "email_address",
    "phone_country_code",
    "phone_number",
)

# user_id is a SERIAL (int4) column
MAX_USER_ID = 2**31 - 1
