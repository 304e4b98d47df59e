# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the admin API.
# Every error a screen can hit is terminal at the editor/route boundary:
# nothing here is retried, the operator re-attempts the action manually.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class AdminConsoleException(Exception):
    """
    Base exception for the admin API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "ADMIN_CONSOLE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Form / Record Exceptions
# =============================================================================

class FormValidationError(AdminConsoleException):
    """Raised when a required form field is missing. No network call was made."""

    def __init__(self, missing: list[str], message: str | None = None):
        super().__init__(
            message=message or f"Missing required fields: {', '.join(missing)}",
            code="VALIDATION_ERROR",
            status_code=400,
            suggestion="Fill in every required field and submit again",
            details={"missing": missing}
        )


class RecordNotFoundError(AdminConsoleException):
    """Raised when a row doesn't exist in its table."""

    def __init__(self, table: str, record_id: Any):
        super().__init__(
            message=f"Record not found in {table}: {record_id}",
            code="RECORD_NOT_FOUND",
            status_code=404,
            suggestion="Refresh the list, the record may have been deleted",
            details={"table": table, "id": str(record_id)}
        )


class EditorStateError(AdminConsoleException):
    """Raised on an illegal editor transition, e.g. submitting twice."""

    def __init__(self, action: str, state: str):
        super().__init__(
            message=f"Cannot {action} while editor is {state}",
            code="EDITOR_STATE_ERROR",
            status_code=409,
            suggestion="Wait for the current submission to finish",
            details={"action": action, "state": state}
        )


class PersistError(AdminConsoleException):
    """Raised when the record store rejects an insert/update/delete/select."""

    def __init__(self, table: str, operation: str, error: str):
        super().__init__(
            message=f"Failed to {operation} {table}: {error}",
            code="PERSIST_FAILED",
            status_code=502,
            suggestion="Try the action again; if it keeps failing check the table permissions",
            details={"table": table, "operation": operation, "error": error}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidMediaFileError(AdminConsoleException):
    """Raised when an attached file is not an accepted media type."""

    def __init__(self, filename: str, content_type: str | None, allowed: list[str]):
        super().__init__(
            message=f"Unsupported media file: {filename} ({content_type or 'unknown type'})",
            code="INVALID_MEDIA_FILE",
            status_code=400,
            suggestion=f"Only these content types are accepted: {', '.join(allowed)}",
            details={"filename": filename, "content_type": content_type, "allowed_types": allowed}
        )


class FileTooLargeError(AdminConsoleException):
    """Raised when an attached file exceeds the size limit."""

    def __init__(self, filename: str, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {filename} {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"filename": filename, "size_mb": size_mb, "max_mb": max_mb}
        )


class UploadFailedError(AdminConsoleException):
    """Raised when the storage bucket rejects an upload. The record was not written."""

    def __init__(self, path: str, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="UPLOAD_FAILED",
            status_code=502,
            suggestion="Your changes were kept; submit again to retry the upload",
            details={"path": path, "error": error}
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class AuthenticationFailedError(AdminConsoleException):
    """Raised when sign-in with email/password fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Sign-in failed: {error}",
            code="AUTHENTICATION_FAILED",
            status_code=401,
            suggestion="Check the email and password and try again",
        )


class NotAnAdminError(AdminConsoleException):
    """Raised when an authenticated user has no admin row."""

    def __init__(self, user_id: str):
        super().__init__(
            message="You are not authorized as an admin",
            code="NOT_AN_ADMIN",
            status_code=403,
            suggestion="Ask a superadmin to add your account to the admin roster",
            details={"user_id": user_id}
        )


class InsufficientRoleError(AdminConsoleException):
    """Raised when an admin attempts a superadmin-only action."""

    def __init__(self, required: str, actual: str | None):
        super().__init__(
            message=f"This action requires the {required} role",
            code="INSUFFICIENT_ROLE",
            status_code=403,
            suggestion="Ask a superadmin to perform this action",
            details={"required": required, "actual": actual}
        )


class AdminUserNotFoundError(AdminConsoleException):
    """Raised when adding an admin whose email has no auth account."""

    def __init__(self, email: str):
        super().__init__(
            message=f"User not found: {email}",
            code="USER_NOT_FOUND",
            status_code=404,
            suggestion="The user must register before they can be made an admin",
            details={"email": email}
        )


class AdminAlreadyExistsError(AdminConsoleException):
    """Raised when the user is already on the admin roster."""

    def __init__(self, email: str):
        super().__init__(
            message=f"This user is already an admin: {email}",
            code="ADMIN_ALREADY_EXISTS",
            status_code=409,
            details={"email": email}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def admin_console_exception_handler(
    request: Request,
    exc: AdminConsoleException
) -> JSONResponse:
    """
    Convert AdminConsoleException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
