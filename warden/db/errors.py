"""Store error hierarchy.

All store implementations raise these errors for consistent error handling.
"""


class StoreError(Exception):
    """Base exception for all store errors.

    All store implementations should wrap backend-specific errors
    in one of the StoreError subclasses.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConnectionError(StoreError):
    """Raised when store connection fails.

    Examples:
        - Database connection timeout
        - Network errors
    """

    pass


class NotFoundError(StoreError):
    """Raised when requested entity is not found.

    This should be raised when a specific entity lookup fails,
    not for empty list results.
    """

    pass


class ConflictError(StoreError):
    """Raised on unique constraint violation.

    Examples:
        - Provisioning a profile that already exists
        - Duplicate primary key
    """

    pass


class AuthorizationError(StoreError):
    """Raised when the row-level policy rejects an operation.

    The caller identity does not own the row it tried to read,
    insert or update.
    """

    pass


class ValidationError(StoreError):
    """Raised on invalid data.

    Examples:
        - Required field missing
        - Constraint violation in the database
    """

    pass
