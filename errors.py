from typing import List, Optional


class RecordsError(Exception):
    """Base class for errors reported back to the caller."""
    status_code = 400
    message = "Invalid request"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class MissingFieldError(RecordsError):
    message = "All fields are required"

    def __init__(self, fields: List[str], message: Optional[str] = None):
        super().__init__(message)
        self.fields = fields


class DateFormatError(RecordsError):
    message = "Invalid date format. Please use YYYY-MM-DD"


class InvalidSemesterError(RecordsError):
    message = "Invalid semester"


class MarksFormatError(RecordsError):
    message = "Invalid marks format. Please enter marks separated by commas (0-100)"

    def __init__(self, index: int, token: str):
        super().__init__()
        self.index = index
        self.token = token


class WeakPasswordError(RecordsError):
    message = "Password must be at least 6 characters long"


class UnsupportedPhotoError(RecordsError):
    message = "Unsupported photo type. Allowed: png, jpg, jpeg, gif, webp"


class DuplicateKeyError(RecordsError):
    message = "A record with this key already exists"


class AuthFailedError(RecordsError):
    status_code = 401
    message = "Invalid login credentials"


class NotFoundError(RecordsError):
    status_code = 404
    message = "Record not found"
