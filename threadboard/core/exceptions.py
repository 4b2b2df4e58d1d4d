"""Domain errors raised by the service layer.

Routers translate these into HTTP responses; services never build
HTTPExceptions themselves.
"""


class ThreadboardError(Exception):
    """Base class for all service-level failures"""

    default_message = "Request failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AlreadyExistsError(ThreadboardError):
    default_message = "User already exists."


class InvalidCredentialsError(ThreadboardError):
    default_message = "Credentials are not valid!"


class InvalidTokenError(ThreadboardError):
    default_message = "Invalid access token or refresh token"


class NotFoundError(ThreadboardError):
    default_message = "Not found"


class ForbiddenError(ThreadboardError):
    default_message = "Not enough permissions"


class InvalidStateError(ThreadboardError):
    default_message = "Cannot edit a deleted post."
