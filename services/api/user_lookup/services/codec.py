"""Cache entry encoding for user records.

Entries are JSON objects carrying the id and every payload field, e.g.
    {"id":1,"name":"Alice","age":30}
"""

from pydantic import ValidationError

from user_lookup.errors import DecodeError
from user_lookup.schemas import UserRecord


def cache_key(user_id: int, prefix: str = "") -> str:
    """Cache key for a user id ("1" for id 1 with no prefix)."""
    return f"{prefix}{user_id}"


def encode_user(user: UserRecord) -> str:
    return user.model_dump_json()


def decode_user(raw: str | bytes) -> UserRecord:
    """Decode a cached entry.

    Raises:
        DecodeError: If the entry is not valid JSON or does not describe a user.
    """
    try:
        return UserRecord.model_validate_json(raw)
    except ValidationError as e:
        raise DecodeError(f"invalid cached user entry: {e.error_count()} error(s)") from e
