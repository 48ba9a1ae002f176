"""Custom exceptions for the expense analytics application."""


class ExpenseTrackerException(Exception):
    """Base exception for all expense tracker errors."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ExpenseTrackerException):
    """Raised when request input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class NotFoundError(ExpenseTrackerException):
    """Raised when a resource or route is not found."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class StoreAccessError(ExpenseTrackerException):
    """Raised when the expense store cannot be read (I/O, corrupt record, backend down)."""

    def __init__(self, message: str = "Expense store access failed"):
        super().__init__(message, status_code=500)


class ConfigurationError(ExpenseTrackerException):
    """Raised when environment configuration is invalid."""

    def __init__(self, message: str = "Invalid configuration"):
        super().__init__(message, status_code=500)
