"""
Error taxonomy for blog-api.

Every error raised by the service modules derives from ApiError and carries
the HTTP status and machine-readable kind the view layer responds with.
"""


class ApiError(Exception):
    status_code = 500
    kind = "server_error"
    default_message = "Internal server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self):
        return {"error": self.kind, "message": self.message}


class ValidationError(ApiError):
    """Missing or malformed input."""

    status_code = 400
    kind = "validation_error"
    default_message = "Invalid request"


class AuthenticationError(ApiError):
    """Missing, invalid or expired credentials. Never says which."""

    status_code = 401
    kind = "authentication_error"
    default_message = "Authentication required"


class AuthorizationError(ApiError):
    """Authenticated, but not allowed to do this."""

    status_code = 403
    kind = "authorization_error"
    default_message = "Access denied"


class NotFoundError(ApiError):
    status_code = 404
    kind = "not_found"
    default_message = "Not found"


class ConflictError(ApiError):
    """Uniqueness or referential conflict reported by the database."""

    status_code = 409
    kind = "conflict"
    default_message = "Conflict"


class ServerError(ApiError):
    pass
