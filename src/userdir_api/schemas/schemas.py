####################################
# --- Request/response schemas --- #
####################################

from datetime import datetime
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import Field
from pydantic import model_validator

from userdir_api.models.user import User


# create (Crud)
class UserCreateRequest(BaseModel):
    """Registration payload for a new user."""

    name_id: str = Field(..., min_length=1, description="External subject identifier from the identity provider")
    identity_provider: str = Field(..., min_length=1)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    photo_url: Optional[str] = None
    email_address: Optional[str] = None
    phone_country_code: Optional[int] = None
    phone_number: Optional[int] = None
    created_by: Optional[str] = None
    date_created: Optional[datetime] = None

    def to_user(self) -> User:
        """Build the User to insert; the modifier starts out as the creator."""
        return User(
            **self.model_dump(),
            modified_by=self.created_by,
            date_modified=self.date_created,
        )


# update (crUd)
class UserProfileUpdateRequest(BaseModel):
    """Profile fields that may be changed after registration."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    photo_url: Optional[str] = None
    email_address: Optional[str] = None
    phone_country_code: Optional[int] = None
    phone_number: Optional[int] = None


# read (cRud)
class GetUsersQueryParams(BaseModel):
    """Query parameters for looking up users by name identifier."""

    name_id: str
    identity_provider: Optional[str] = None


# read (cRud)
class SearchUsersQueryParams(BaseModel):
    """Query parameters for prefix search; exactly one must be given."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = None

    @model_validator(mode="after")
    def validate_single_criterion(self):
        """Validate that exactly one search criterion is set."""
        given = [value for value in (self.first_name, self.last_name, self.name) if value is not None]
        if len(given) != 1:
            raise ValueError("Exactly one of first_name, last_name or name must be provided")
        return self


class GetUsersResponse(BaseModel):
    """Response model for user lists."""

    Message: str
    Users: List[User]


class PhotoUrlResponse(BaseModel):
    """Response model for the photo URL of a user."""

    user_id: int
    photo_url: Optional[str]
