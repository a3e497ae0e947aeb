# marketplace/core/exceptions.py
from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """Missing or malformed input; the message names the offending field"""
    def __init__(self, detail: str = "Invalid request data"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail
        )


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail
        )


class UnauthorizedError(HTTPException):
    """Wrong role, or caller does not own the resource"""
    def __init__(self, detail: str = "Not authorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail
        )


class ConflictError(HTTPException):
    """A state guard did not hold when the write was applied"""
    def __init__(self, detail: str = "Order cannot be updated at this time"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail
        )


class UpstreamServiceError(HTTPException):
    """Geocoding, mail or store failure"""
    def __init__(
        self,
        detail: str = "Service temporarily unavailable",
        status_code: int = status.HTTP_503_SERVICE_UNAVAILABLE
    ):
        super().__init__(
            status_code=status_code,
            detail=detail
        )
