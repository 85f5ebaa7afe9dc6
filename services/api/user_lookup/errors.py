"""Errors that cross the lookup boundary.

Only StoreError and ResolveTimeoutError reach callers of the resolver.
Cache faults and undecodable cache entries are absorbed before that.
"""


class UserLookupError(RuntimeError):
    """Base class for user lookup failures."""


class StoreError(UserLookupError):
    """The durable store failed for a reason other than "no such row"."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ResolveTimeoutError(UserLookupError):
    """The caller's deadline expired before the lookup completed."""


class DecodeError(UserLookupError):
    """A cached entry could not be decoded into a user record."""
