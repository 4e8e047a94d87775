# client/errors.py


class ExternalServiceError(Exception):
    """
    The book search API could not be reached or answered with an error.
    """


class ApiError(Exception):
    """
    The Bookshelf API rejected a request or could not be reached.
    `code` mirrors the server's `extensions.code` when there is one.
    """

    def __init__(self, message: str, code: str = "NETWORK_ERROR"):
        super().__init__(message)
        self.message = message
        self.code = code
