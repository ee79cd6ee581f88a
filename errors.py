class LibraryError(Exception):
    """Base class for user-facing business failures."""

    status_code = 400
    message = 'Request failed'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'error': self.message}


class Unauthenticated(LibraryError):
    status_code = 401
    message = 'Access denied'


class InvalidToken(LibraryError):
    # verification failure is 400; a missing credential is Unauthenticated (401)
    status_code = 400
    message = 'Invalid token'


class RoleMismatch(LibraryError):
    status_code = 403
    message = 'Access denied'


Forbidden = RoleMismatch


class BorrowLimitReached(LibraryError):
    status_code = 400
    message = 'Borrowing limit reached'


class BookUnavailable(LibraryError):
    status_code = 404
    message = 'Book not available'


class NotBorrowed(LibraryError):
    status_code = 404
    message = 'Book not found in borrowed list'


class BookNotFound(LibraryError):
    status_code = 404
    message = 'Book not found'


class NotFound(LibraryError):
    status_code = 404
    message = 'Not found'


class DuplicateEmail(LibraryError):
    status_code = 400
    message = 'Email already exists'


class InvalidCredentials(LibraryError):
    status_code = 400
    message = 'Invalid credentials'


class ValidationError(LibraryError):
    status_code = 400
    message = 'Invalid request'


class InconsistentState(LibraryError):
    """Authenticated identity with no backing user record."""

    status_code = 500
    message = 'An unexpected error occurred'


class LendingConflict(LibraryError):
    """Concurrent updates to the same reader kept winning; nothing was applied."""

    status_code = 409
    message = 'Concurrent update, please retry'
