"""
Error taxonomy of the ledger.

Every error is an HTTPException so that services raise them the same way
routers do; the handlers in main.py render them as
``{"success": false, "error": ...}``.
"""

from typing import Optional

from fastapi import HTTPException, status


class LedgerError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error. Please try again later."

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail, headers=headers)


class ValidationError(LedgerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"

    def __init__(self, detail: Optional[str] = None, fields: Optional[list[str]] = None):
        super().__init__(detail)
        self.fields = fields or []


class Unauthorized(LedgerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Access token required. Please login to continue."

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(LedgerError):
    # one message for every rule, so callers cannot probe the policy
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied. You do not have permission to perform this action."


class NotFound(LedgerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class StoreFailure(LedgerError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "The service is temporarily unavailable. Please try again."
