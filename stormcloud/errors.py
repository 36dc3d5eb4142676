"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when request input fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class UnknownResourceTypeError(ValidationError):
    """Raised when a permission is requested for an unconfigured data type."""

    def __init__(self, data_type):
        """Initialize the error."""
        super().__init__(f"Unknown data type: {data_type!r}.")
        self.data_type = data_type


class UnauthorizedError(AppError):
    """Raised when the caller may not perform the requested action."""

    def __init__(self, message="Unauthorized"):
        """Initialize the error."""
        super().__init__(message, 401)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class ServerError(AppError):
    """Raised when the server is missing configuration it needs."""

    def __init__(self, message="Internal server error."):
        """Initialize the error."""
        super().__init__(message, 500)


class EnvironmentNotFoundError(ServerError):
    """Raised when the configured environment does not exist in the store."""

    def __init__(self, name):
        """Initialize the error."""
        super().__init__(f"Environment {name!r} is not configured.")
        self.name = name
