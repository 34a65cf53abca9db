"""
SQL statements for the users table.

Positional parameter counts are part of the repository contract:
INSERT_USER binds 12 values, UPDATE_USER binds 7, prefix searches bind 1 or 2.
"""

from userdir_api.models.user import UPDATABLE_FIELDS
from userdir_api.models.user import USER_COLUMNS

USER_TABLE = "users"
USER_NAME_INDEX = "ix_users_name_id_identity_provider"

# Every column except the generated key, in insert order
INSERT_COLUMNS = USER_COLUMNS[1:]

_SELECT_LIST = ", ".join(USER_COLUMNS)
_INSERT_LIST = ", ".join(INSERT_COLUMNS)
_INSERT_PLACEHOLDERS = ", ".join(f"${i}" for i in range(1, len(INSERT_COLUMNS) + 1))
_UPDATE_ASSIGNMENTS = ", ".join(f"{column} = ${i}" for i, column in enumerate(UPDATABLE_FIELDS, start=1))

# Appended to caller-supplied name fragments. Input is not escaped, so % and _
# in the fragment behave as LIKE wildcards.
WILDCARD_SUFFIX = "%"

INSERT_USER = f"""
    INSERT INTO {USER_TABLE} ({_INSERT_LIST})
    VALUES ({_INSERT_PLACEHOLDERS})
    RETURNING user_id
"""

GET_USER_BY_USER_ID = f"""
    SELECT {_SELECT_LIST} FROM {USER_TABLE}
    WHERE user_id = $1
"""

GET_USER_BY_NAME_ID = f"""
    SELECT {_SELECT_LIST} FROM {USER_TABLE}
    WHERE name_id = $1
"""

GET_USER_BY_NAME_ID_AND_PROVIDER = f"""
    SELECT {_SELECT_LIST} FROM {USER_TABLE}
    WHERE name_id = $1 AND identity_provider = $2
"""

GET_USER_BY_FIRST_NAME = f"""
    SELECT {_SELECT_LIST} FROM {USER_TABLE}
    WHERE first_name LIKE $1
"""

GET_USER_BY_LAST_NAME = f"""
    SELECT {_SELECT_LIST} FROM {USER_TABLE}
    WHERE last_name LIKE $1
"""

GET_USER_BY_FIRST_OR_LAST_NAME = f"""
    SELECT {_SELECT_LIST} FROM {USER_TABLE}
    WHERE first_name LIKE $1 OR last_name LIKE $2
"""

UPDATE_USER = f"""
    UPDATE {USER_TABLE}
    SET {_UPDATE_ASSIGNMENTS}
    WHERE name_id = ${len(UPDATABLE_FIELDS) + 1}
"""

GET_USER_PHOTO_URL_BY_USER_ID = f"""
    SELECT photo_url FROM {USER_TABLE}
    WHERE user_id = $1
"""

# Not guarded with IF NOT EXISTS: a second run fails with DuplicateTableError.
CREATE_USER_TABLE = f"""
    CREATE TABLE {USER_TABLE} (
        user_id SERIAL PRIMARY KEY,
        name_id VARCHAR(256) NOT NULL,
        identity_provider VARCHAR(256) NOT NULL,
        first_name VARCHAR(256),
        last_name VARCHAR(256),
        photo_url VARCHAR(1024),
        email_address VARCHAR(256),
        phone_country_code INTEGER,
        phone_number BIGINT,
        date_created TIMESTAMPTZ,
        created_by VARCHAR(256),
        date_modified TIMESTAMPTZ,
        modified_by VARCHAR(256)
    )
"""

CREATE_USER_TABLE_INDEX = f"""
    CREATE INDEX {USER_NAME_INDEX}
    ON {USER_TABLE} (name_id, identity_provider)
"""
