"""Settings for the user directory API."""

from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings for the user directory API.

    [pydantic.BaseSettings](https://docs.pydantic.dev/latest/concepts/pydantic_settings/) reads,
    validates and types configuration values from:
    1. Environment variables (production)
    2. .env file (local development)

    Environment variable names are treated case-insensitively.
    """

    # Database
    database_connection_string: str
    """PostgreSQL connection string (DSN) for the user directory database (required)."""

    db_pool_min_size: int = 1
    """Minimum number of pooled connections."""

    db_pool_max_size: int = 10
    """Maximum number of pooled connections."""

    db_command_timeout: float = 60
    """Default statement timeout in seconds."""

    db_connect_timeout: float = 15
    """Connection establishment timeout in seconds."""

    create_schema_on_startup: bool = False
    """Create the users table and index when the application starts."""

    # Logging
    log_level: str = "INFO"
    """Minimum level of the stdout log sink."""

    service_name: str = "User Directory API"
    """Service name reported by health endpoints and logs."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",  # Load from .env file if it exists (local development)
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra environment variables not defined in the model
        validate_default=True,
    )
