"""Exceptions raised by the triage engine and its hosting service."""


class TriageError(Exception):
    """Base class for all triage engine errors."""


class CatalogValidationError(TriageError):
    """Raised when a catalog definition violates its structural rules."""


class OutOfRangeError(TriageError, IndexError):
    """Raised when a category index falls outside the catalog bounds."""

    def __init__(self, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(f"Category index {index} out of range [0, {count})")


class InvalidOptionError(TriageError, ValueError):
    """Raised when an answer references an option the category does not offer."""

    def __init__(self, category_id: str, option_id: str):
        self.category_id = category_id
        self.option_id = option_id
        super().__init__(
            f"Option '{option_id}' does not belong to category '{category_id}'"
        )


class InvalidTransitionError(TriageError):
    """Raised when an operation is not allowed in the session's current state."""


class IncompleteSessionError(TriageError):
    """Raised when a result is requested before every category is answered."""


class SessionNotFoundError(TriageError, KeyError):
    """Raised when a session id is not registered."""


class CatalogNotFoundError(TriageError, KeyError):
    """Raised when a catalog id is not registered."""
