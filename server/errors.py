# server/errors.py

# -------------------------------
# Error taxonomy
# -------------------------------

class BookshelfError(Exception):
    """
    Base class for errors reported to API clients.
    Each subclass carries a machine-readable code that ends up in the
    GraphQL error's `extensions.code`.
    """
    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookshelfError):
    code = "BAD_USER_INPUT"


class AuthenticationError(BookshelfError):
    code = "UNAUTHENTICATED"


class InvalidTokenError(AuthenticationError):
    code = "INVALID_TOKEN"


class NotFoundError(BookshelfError):
    code = "NOT_FOUND"


class ConfigurationError(BookshelfError):
    code = "CONFIGURATION_ERROR"
