"""
exceptions.py

Error taxonomy for the city library. Every error is recoverable and carries a
human-readable message that the console prints as-is.
"""


class LibraryError(Exception):
    """Base class for all library errors."""


# ---------------- Validation ----------------
class ValidationError(LibraryError):
    """Malformed or missing input, rejected before any state changes."""


class InvalidInputError(ValidationError):
    pass


class InvalidAccountError(ValidationError):
    pass


class InvalidMediaError(ValidationError):
    pass


class InvalidResourceError(ValidationError):
    pass


class InvalidReviewError(ValidationError):
    pass


class InvalidBookingWindowError(ValidationError):
    pass


class CellOutOfBoundsError(ValidationError):
    pass


# ---------------- State conflicts ----------------
class StateConflictError(LibraryError):
    """The operation is legal on its own but not in the current state."""


class CopyNotAvailableError(StateConflictError):
    pass


class CopyNotBorrowedError(StateConflictError):
    pass


class BorrowingError(StateConflictError):
    """The borrowing policy refused a borrow or return."""


class BorrowingNotAllowedError(BorrowingError):
    pass


class LoanLimitError(BorrowingError):
    pass


class OverdueBlockError(BorrowingError):
    pass


class NotBorrowerError(BorrowingError):
    pass


class BookingConflictError(StateConflictError):
    pass


class NoBookingError(StateConflictError):
    """A member reviewed a resource they never booked."""


class DuplicateEntityError(StateConflictError):
    pass


# ---------------- Not found ----------------
class NotFoundError(LibraryError):
    """A referenced entity id does not exist."""


class MediaNotFoundError(NotFoundError):
    pass


class CopyNotFoundError(NotFoundError):
    pass


class ResourceNotFoundError(NotFoundError):
    pass


class MemberNotFoundError(NotFoundError):
    pass


class LibraryNotFoundError(NotFoundError):
    pass
