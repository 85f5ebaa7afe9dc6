"""Pydantic schemas for API request/response validation."""

from user_lookup.schemas.common import ErrorDetail, ErrorResponse
from user_lookup.schemas.user import UserRecord

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "UserRecord",
]
