"""Error taxonomy for EcoLog core operations."""

from typing import Optional


class EcoLogError(Exception):
    """Base error for EcoLog core operations."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(EcoLogError):
    """Bad or missing input. `field` names the offending input when known."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class NotFoundError(EcoLogError):
    """Referenced user or action does not exist."""


class PersistenceError(EcoLogError):
    """Underlying store failed. Not retried by the core."""
