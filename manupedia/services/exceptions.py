# manupedia/services/exceptions.py

class ManuscriptError(Exception):
    """Base exception for manuscript-related errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationError(ManuscriptError):
    """Raised when input is missing or malformed (title, attachment, status token, paging)."""
    pass


class NotFoundError(ManuscriptError):
    """Raised when a record, user or stored image cannot be found."""
    pass


class AuthorizationError(ManuscriptError):
    """Raised when a caller tries to change a manuscript they do not own."""
    pass
