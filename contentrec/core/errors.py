from fastapi import HTTPException, status
from typing import Dict, Any


class APIError(HTTPException):
    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str = None,
        metadata: Dict[str, Any] = None
    ):
        super().__init__(
            status_code=status_code,
            detail={
                "message": detail,
                "error_code": error_code or "UNKNOWN_ERROR",
                "metadata": metadata or {}
            }
        )


class AuthenticationError(APIError):
    def __init__(self, detail: str = "Authentication failed"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="AUTHENTICATION_FAILED"
        )


class ValidationError(APIError):
    def __init__(self, detail: str = "Validation failed", field: str = None):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code="VALIDATION_ERROR",
            metadata={"field": field} if field else None
        )


class NotFoundError(APIError):
    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} with id {resource_id} not found",
            error_code="RESOURCE_NOT_FOUND",
            metadata={"resource": resource, "id": resource_id}
        )


class TransientStoreError(APIError):
    """The persistence layer is unavailable or timed out; callers may retry."""

    def __init__(self, operation: str, reason: str = ""):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Store unavailable during {operation}",
            error_code="STORE_UNAVAILABLE",
            metadata={"operation": operation, "reason": reason}
        )
