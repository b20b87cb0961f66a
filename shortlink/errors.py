"""
Error taxonomy for shortlink.

Every failure the engine can report is a subclass of `ShortlinkError`. The
HTTP layer maps them to responses through `status_code`, so business code
never imports FastAPI.

    ShortlinkError
    ├── ValidationError (also ValueError)
    │   ├── InvalidURL
    │   └── InvalidCodeFormat
    ├── CodeAlreadyExists
    ├── CodeAllocationExhausted
    ├── LinkNotFound
    └── StoreError
        ├── CodeConflict
        └── StoreUnavailable
"""

__all__ = [
    "ShortlinkError",
    "ValidationError",
    "InvalidURL",
    "InvalidCodeFormat",
    "CodeAlreadyExists",
    "CodeAllocationExhausted",
    "LinkNotFound",
    "StoreError",
    "CodeConflict",
    "StoreUnavailable",
]


class ShortlinkError(Exception):
    """Base class for every error raised by the engine."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ShortlinkError, ValueError):
    """Caller supplied input that can never succeed."""

    status_code = 400
    default_message = "Invalid request"


class InvalidURL(ValidationError):
    default_message = "Invalid URL"


class InvalidCodeFormat(ValidationError):
    default_message = "Custom code must match [A-Za-z0-9]{6,8}"


class CodeAlreadyExists(ShortlinkError):
    """An explicitly requested code is already taken."""

    status_code = 409
    default_message = "Code already exists"


class CodeAllocationExhausted(ShortlinkError):
    """Every generated candidate collided within the retry budget."""

    status_code = 500
    default_message = "Could not allocate a unique code"


class LinkNotFound(ShortlinkError):
    status_code = 404
    default_message = "Not Found"

    def __init__(self, code=None, message=None):
        self.code = code
        super().__init__(message)


class StoreError(ShortlinkError):
    """Raised by storage backends."""


class CodeConflict(StoreError):
    """The store refused an insert because the key already exists."""

    status_code = 409
    default_message = "Code already exists"

    def __init__(self, code=None, message=None):
        self.code = code
        super().__init__(message)


class StoreUnavailable(StoreError):
    """Transient infrastructure failure talking to the store."""

    status_code = 503
    default_message = "Storage unavailable"
