# users_api/core/exceptions.py

class AppError(Exception):
    def __init__(self, message: str, *, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


class ValidationError(AppError):
    def __init__(self, message: str = "Invalid input") -> None:
        super().__init__(message, status_code=400)


class ConflictError(AppError):
    # Conflito de unicidade responde 400, como os demais erros de entrada
    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=400)


class AuthError(AppError):
    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status_code=401)


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=404)


class StorageError(AppError):
    def __init__(self, message: str = "Storage operation failed") -> None:
        super().__init__(message, status_code=500)


class InternalError(AppError):
    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message, status_code=500)
