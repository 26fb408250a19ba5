"""
Error taxonomy for store access, validation and the create flows.

Views catch these at the request boundary, log them and flash a message;
nothing here is fatal to the process.
"""


class UserQRError(Exception):
    """Base class for application errors."""


class FetchError(UserQRError):
    """The record store could not be read."""


class WriteError(UserQRError):
    """An insert or update against the record store failed."""


class ImageAttachError(WriteError):
    """Phase 2 of creation failed; the user exists but has no QR code."""

    def __init__(self, message, user=None):
        super().__init__(message)
        self.user = user


class BulkCreateError(WriteError):
    """At least one pipeline of a bulk creation failed."""

    def __init__(self, message, failed=0, total=0):
        super().__init__(message)
        self.failed = failed
        self.total = total


class RecordNotFound(UserQRError):
    """No user with the requested id."""

    def __init__(self, user_id):
        super().__init__(f'User not found: {user_id}')
        self.user_id = user_id


class ValidationError(UserQRError):
    """Client-side field checks failed before any write.

    ``errors`` maps field name to a human-readable message.
    """

    def __init__(self, errors):
        super().__init__('; '.join(f'{k}: {v}' for k, v in errors.items()))
        self.errors = dict(errors)
