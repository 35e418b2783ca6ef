# farmstand/errors.py
from __future__ import annotations


class NotFoundError(LookupError):
    """Raised when a Farm or Product id does not resolve to a stored record."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found")


class ValidationFailed(ValueError):
    """Raised by the model layer when a field violates its constraint."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Validation failed: {field}: {message}")
