class AppError(Exception):
    """Base class for all timetabler exceptions."""
    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

class TimetableValidationError(AppError, ValueError):
    """Raised when a time, day or slot record is malformed."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, details=details)

class LookupFailure(AppError):
    """Raised when a subject or tutorial group cannot be resolved by the catalog."""

class ResourceNotFoundError(LookupFailure):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            f"{resource_type} with id {resource_id} not found",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )

class CatalogUnavailableError(LookupFailure):
    """Raised when the catalog backend cannot be reached or the query fails."""

class TimetableAssemblyError(AppError):
    """Raised when no part of a timetable could be assembled."""
