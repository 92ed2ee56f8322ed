"""
Error taxonomy shared by the stores and the request layer.

Every error carries a user-facing message. The request layer decides how
each kind is surfaced: validation and auth failures re-render the form with
a 422 status, missing documents and conflicts become a flash message plus a
redirect.
"""


class FlatCMSError(Exception):
    """Base class for all recoverable application errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FlatCMSError):
    """Bad filename, bad characters, bad extension or an empty field."""
    status_code = 422


class AuthError(FlatCMSError):
    status_code = 422


class NotFoundError(FlatCMSError):
    def __init__(self, name: str):
        super().__init__(f'"{name}" does not exist.')
        self.name = name


class ConflictError(FlatCMSError):
    """Target name already taken (rename, duplicate, sign-up)."""
