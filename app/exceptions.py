"""
Exception hierarchy for the paste store.

Not-found and not-available stay distinct here; the HTTP layer catches
PasteUnavailableError and reports both the same way.
"""


class PasteError(Exception):
    """Base class for all paste store errors."""
    pass


class ValidationError(PasteError):
    """
    Raised when creation input is malformed.

    Attributes:
        field: Name of the offending input field
        message: Human-readable description of the problem
    """

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class PasteUnavailableError(PasteError):
    """
    Raised when a handle cannot be served.
    """

    def __init__(self, paste_id: str):
        super().__init__(paste_id)
        self.paste_id = paste_id


class PasteNotFoundError(PasteUnavailableError):
    """
    Raised when no record exists for the handle.
    """
    pass


class PasteNotAvailableError(PasteUnavailableError):
    """
    Raised when the record exists but has expired or used up its views.
    """
    pass


class StorageError(PasteError):
    """
    Raised when the storage backend is unreachable or rejects an operation.
    """
    pass
