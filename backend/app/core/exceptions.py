class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ScheduleValidationError(AppError):
    """Raised when a schedule fails its pre-conditions and cannot be conflict-checked."""
    def __init__(self, errors: list[str]):
        super().__init__("Schedule failed validation", status_code=422, details={"errors": list(errors)})
        self.errors = list(errors)

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)
