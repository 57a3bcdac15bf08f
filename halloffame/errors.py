"""
halloffame/errors.py
Centralized error handling

ERROR RESPONSE STRUCTURE:
{
    "success": false,
    "error": "Human-readable description",
    "code": "UNIQUE_ERROR_CODE",
    "details": {} (optional)
}

HTTP STATUS CODE DISCIPLINE:
- 400: Validation failure / malformed request
- 401: Authentication missing, invalid or expired
- 403: Role denied (or self-deletion)
- 404: Resource does not exist
- 409: Uniqueness conflict
- 429: Rate limit exceeded
- 500: Unexpected store or server failure
"""
import logging
from typing import Any, Dict, Optional

from fastapi import status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorCode:
    """Unique error codes for machine-readable error handling"""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_FIELD = "MISSING_FIELD"
    TOO_MANY_SELECTIONS = "TOO_MANY_SELECTIONS"
    DUPLICATE_SELECTION = "DUPLICATE_SELECTION"

    AUTH_REQUIRED = "AUTH_REQUIRED"
    AUTH_EXPIRED = "AUTH_EXPIRED"
    AUTH_INVALID = "AUTH_INVALID"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    FORBIDDEN = "FORBIDDEN"
    SELF_DELETION = "SELF_DELETION"

    NOT_FOUND = "NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    NOMINATION_NOT_FOUND = "NOMINATION_NOT_FOUND"
    PERSON_NOT_FOUND = "PERSON_NOT_FOUND"

    CONFLICT = "CONFLICT"
    USERNAME_TAKEN = "USERNAME_TAKEN"
    SETUP_COMPLETED = "SETUP_COMPLETED"

    RATE_LIMITED = "RATE_LIMITED"

    STORE_ERROR = "STORE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class APIError(Exception):
    """Base API exception with consistent structure"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details
        super().__init__(message)

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "success": False,
            "error": self.message,
            "code": self.code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def to_response(self) -> JSONResponse:
        """Convert to FastAPI JSONResponse"""
        return JSONResponse(
            status_code=self.status_code,
            content=self.to_dict(),
            headers=self.headers,
        )


class ValidationError(APIError):
    """400 - missing required field or malformed input"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = ErrorCode.VALIDATION_ERROR


class TooManySelections(ValidationError):
    default_code = ErrorCode.TOO_MANY_SELECTIONS

    def __init__(self, limit: int, submitted: int):
        super().__init__(
            f"Maximum {limit} selections allowed",
            details={"limit": limit, "submitted": submitted},
        )


class DuplicateSelection(ValidationError):
    default_code = ErrorCode.DUPLICATE_SELECTION

    def __init__(self, person_name: str, person_year: str):
        super().__init__(
            "The same person cannot be selected twice",
            details={"person_name": person_name, "person_year": person_year},
        )


class AuthError(APIError):
    """401 - bad credentials, or missing/expired/invalid token"""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = ErrorCode.AUTH_REQUIRED

    def __init__(self, message: str = "Authentication required", code: Optional[str] = None):
        super().__init__(message, code)

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class InvalidCredentials(AuthError):
    def __init__(self):
        super().__init__("Invalid credentials", ErrorCode.INVALID_CREDENTIALS)


class ForbiddenError(APIError):
    """403 - role check failed or self-deletion attempt"""
    status_code = status.HTTP_403_FORBIDDEN
    default_code = ErrorCode.FORBIDDEN


class NotFoundError(APIError):
    """404 - referenced id or pair absent"""
    status_code = status.HTTP_404_NOT_FOUND
    default_code = ErrorCode.NOT_FOUND


class ConflictError(APIError):
    """409 - uniqueness violation"""
    status_code = status.HTTP_409_CONFLICT
    default_code = ErrorCode.CONFLICT


class StoreError(APIError):
    """500 - unexpected persistence failure"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = ErrorCode.STORE_ERROR

    def __init__(self, message: str = "A storage error occurred", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)


def error_body(message: str, code: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build the standard error envelope for handlers that do not raise APIError."""
    body = {"success": False, "error": message, "code": code}
    if details:
        body["details"] = details
    return body


STATUS_CODE_MAPPING = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.AUTH_REQUIRED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    409: ErrorCode.CONFLICT,
    429: ErrorCode.RATE_LIMITED,
    500: ErrorCode.INTERNAL_ERROR,
}


def code_for_status(status_code: int) -> str:
    if status_code >= 500:
        return ErrorCode.INTERNAL_ERROR
    return STATUS_CODE_MAPPING.get(status_code, ErrorCode.VALIDATION_ERROR)
