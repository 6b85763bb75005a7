"""
Application-wide exception hierarchy.

Services raise these; the app factory registers one handler per type and
renders the standard ``{"success": false, "error": ..., "code": ...}``
envelope with a consistent HTTP status.

Usage:
    from tracker.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Project", resource_id="PRJ-2026-001")
    raise ValidationError("projectId is required")
"""


class NotFoundError(Exception):
    """Raised when a requested record does not exist in its sheet.

    Args:
        resource: Human-readable entity name (e.g. "Project", "WorkLog").
        resource_id: The key that was looked up. Logged, and echoed in the message.
    """

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        super().__init__(msg)


class ValidationError(Exception):
    """Raised when request input fails a required-field or business rule.

    Maps to HTTP 400.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class ConflictError(Exception):
    """Raised when an insert would duplicate a row that must be unique.

    The row store has no unique constraints, so uniqueness is checked by
    scanning before insert. Maps to HTTP 400 with code DUPLICATE_ENTRY.
    """

    def __init__(self, resource: str, field: str, value: str | None = None) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} with {field}={value!r} already exists")


class AuthenticationError(Exception):
    """No valid session, or bad credentials. Maps to HTTP 401."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class PermissionDeniedError(Exception):
    """The session user lacks the role or ownership an operation needs. HTTP 403."""

    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message)


class RowStoreError(Exception):
    """The spreadsheet backend failed or a sheet/column is missing. HTTP 500."""
