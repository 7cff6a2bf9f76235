class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ScheduleConflictError(AppError):
    """Raised when a teacher is already committed elsewhere at the requested slot."""
    def __init__(self, message: str, conflicts: list[dict]):
        super().__init__(message, status_code=409, details={"conflicts": conflicts})
        self.conflicts = conflicts


class SlotAlreadyTakenError(AppError):
    """Raised when the store rejects a write because the slot is already occupied."""
    def __init__(self, message: str = "Horário já reservado por outro usuário", details: dict = None):
        super().__init__(message, status_code=409, details=details)


class PermissionDeniedError(AppError):
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message, status_code=403)


class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)


class ConfirmationRequiredError(AppError):
    """Raised when a destructive operation is missing its explicit confirmation."""
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class StoreError(AppError):
    """Raised for database failures that are neither conflicts nor missing rows."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=502, details=details)
