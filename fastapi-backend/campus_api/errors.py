"""Domain errors raised by the service layer.

Each carries the HTTP status the API answers with; `main.py` registers a
handler that renders them as ``{"detail": message}``.
"""

from fastapi import status


class ServiceError(RuntimeError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(ServiceError):
    # Clients of the signup endpoints expect duplicates as a plain 400.
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


__all__ = [
    "ServiceError",
    "BadRequestError",
    "ConflictError",
    "UnauthorizedError",
    "NotFoundError",
]
