"""
models/errors.py
----------------
Error taxonomy shared by the repositories, services and handlers.
"""


class FarmKeeperError(Exception):
    """Base class for every error raised by this application."""


class UnknownRouteError(FarmKeeperError):
    """Raised when a route name is not one of the registered routes."""

    def __init__(self, route: str):
        self.route = route
        super().__init__(f"Unknown route: {route!r}")


class InvalidPageSizeError(FarmKeeperError):
    """Raised for a zero or negative page size."""

    def __init__(self, page_size: int):
        self.page_size = page_size
        super().__init__(f"Page size must be positive, got {page_size}")


class InvalidPageNumberError(FarmKeeperError):
    """Raised for a page number below 1."""

    def __init__(self, page_number: int):
        self.page_number = page_number
        super().__init__(f"Page number must be at least 1, got {page_number}")


class QueryExecutionError(FarmKeeperError):
    """
    Wraps any failure reported by the database driver
    (connection loss, syntax error, constraint violation, timeout).
    The driver exception is kept in `cause` and chained as __cause__.
    """

    def __init__(self, message: str, cause: BaseException):
        self.cause = cause
        super().__init__(f"{message}: {cause}")


class InvalidRecordError(FarmKeeperError):
    """Raised when a write is missing its values or its identifying columns."""


class InvalidCredentialsError(FarmKeeperError):
    """Raised when an email/password pair does not match a stored user."""


class EmailAlreadyRegisteredError(FarmKeeperError):
    """Raised on signup with an email that already has an account."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email already registered: {email}")


class ForeignRecordError(InvalidRecordError):
    """Raised when a write points at, or changes ownership to, rows of another owner."""

    def __init__(self, route: str, columns: list[str]):
        self.route = route
        self.columns = columns
        super().__init__(f"{route}: {', '.join(columns)} must refer to your own records")


class NormalizationWarning(UserWarning):
    """Non-fatal problem found while normalizing result rows."""
