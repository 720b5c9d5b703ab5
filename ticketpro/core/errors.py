"""Application error taxonomy.

Services and routes raise these; the handlers registered in ``ticketpro.main``
turn them into the ``{success, message, errors?}`` envelope.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str = "Internal server error", errors: list | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class ValidationError(AppError):
    status_code = 400


class AuthenticationError(AppError):
    status_code = 401


class AuthorizationError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409
