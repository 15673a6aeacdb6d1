"""Error kinds raised by the board services.

Routes translate these into JSON ``{"error": message}`` responses; nothing in
the services retries on failure.
"""


class BoardError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BoardError, ValueError):
    status_code = 400


class UploadRejected(ValidationError):
    """A file failed the upload rules; ``reason`` is a stable code."""

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


class AuthenticationError(BoardError):
    status_code = 401


class PermissionDeniedError(BoardError):
    status_code = 403


class NotFoundError(BoardError):
    status_code = 404


class StorageError(BoardError):
    status_code = 500


class RepositoryError(BoardError):
    status_code = 500
