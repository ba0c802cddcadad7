"""Error taxonomy shared by the services and the HTTP layer.

Every error carries the HTTP status it maps to and a human readable message.
The class name doubles as the machine readable ``kind`` sent to clients.
"""


class RootleError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class InvalidInput(RootleError):
    status_code = 400
    message = "Invalid input"


class DuplicateAccount(RootleError):
    status_code = 409
    message = "Username already exists"


class InvalidCredentials(RootleError):
    status_code = 400
    message = "Invalid credentials"


class AuthenticationError(RootleError):
    status_code = 401
    message = "Could not validate credentials"


class MissingToken(AuthenticationError):
    message = "No token, authorization denied"


class InvalidToken(AuthenticationError):
    message = "Token is not valid"


class ExpiredToken(AuthenticationError):
    message = "Token has expired"


class MissingFile(RootleError):
    status_code = 400
    message = "No file selected or invalid file type."


class MissingClassification(RootleError):
    status_code = 400
    message = "Faculty and Department are required for upload."


class UnsupportedType(RootleError):
    status_code = 400
    message = "Invalid file type. Only PDF, Word documents, and images are allowed."


class FileTooLarge(RootleError):
    status_code = 413
    message = "File exceeds the maximum upload size."


class NotFound(RootleError):
    status_code = 404
    message = "File not found."


class StoreIOFailure(RootleError):
    status_code = 500
    message = "Server error while accessing storage."
