"""Typed application errors, rendered as ``{error, code, details?, field?}``."""

from typing import Any

from fastapi import status


class AppError(Exception):
    """Base class for every error surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"
    message: str = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: list[str] | None = None,
        field: str | None = None,
    ) -> None:
        self.message = message or self.message
        self.details = details
        self.field = field
        super().__init__(self.message)

    def extra(self) -> dict[str, Any]:
        """Additional top-level payload keys for this error."""
        return {}

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        if self.field:
            body["field"] = self.field
        body.update(self.extra())
        return body


# ── 400 ──────────────────────────────────────────────────────

class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
    message = "Validation error"


class InvalidColor(ValidationError):
    code = "INVALID_COLOR"
    message = "Invalid color format. Use hex color codes."

    def __init__(self, color: str) -> None:
        super().__init__(field="color", details=[f"'{color}' is not a hex color"])


class InvalidCurrentPassword(ValidationError):
    code = "INVALID_CURRENT_PASSWORD"
    message = "Current password is incorrect"


class AlreadyPro(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "ALREADY_PRO_PLAN"
    message = "Tenant is already on Pro plan"


# ── 401 ──────────────────────────────────────────────────────

class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTH_ERROR"
    message = "Authentication failed"


class MissingToken(AuthenticationError):
    code = "MISSING_TOKEN"
    message = "Access token required"


class InvalidToken(AuthenticationError):
    code = "INVALID_TOKEN"
    message = "Invalid access token"


class ExpiredToken(AuthenticationError):
    code = "EXPIRED_TOKEN"
    message = "Access token expired"


class InvalidUser(AuthenticationError):
    code = "INVALID_USER"
    message = "Invalid or inactive user"


class InvalidCredentials(AuthenticationError):
    code = "INVALID_CREDENTIALS"
    message = "Invalid credentials"


class InactiveAccount(AuthenticationError):
    code = "INACTIVE_ACCOUNT"
    message = "Account is inactive"


# ── 403 ──────────────────────────────────────────────────────

class PermissionDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "ACCESS_DENIED"
    message = "Access denied"


class AdminRequired(PermissionDenied):
    code = "ADMIN_REQUIRED"
    message = "Admin access required"


class MemberRequired(PermissionDenied):
    code = "MEMBER_REQUIRED"
    message = "Member access required"


class TenantAccessDenied(PermissionDenied):
    code = "TENANT_ACCESS_DENIED"
    message = "Access denied to this tenant"


class NoteAccessDenied(PermissionDenied):
    code = "NOTE_ACCESS_DENIED"
    message = "Access denied to this note"


class PasswordChangeRequired(PermissionDenied):
    code = "PASSWORD_CHANGE_REQUIRED"
    message = "Password must be changed before continuing"


class NoteLimitReached(PermissionDenied):
    code = "NOTE_LIMIT_REACHED"

    def __init__(self, current_count: int, limit: int, plan: str) -> None:
        self.current_count = current_count
        self.limit = limit
        self.plan = plan
        super().__init__(f"Note limit reached. Current plan allows {limit} notes.")

    def extra(self) -> dict[str, Any]:
        return {
            "current_count": self.current_count,
            "limit": self.limit,
            "subscription": self.plan,
        }


# ── 404 / 409 ────────────────────────────────────────────────

class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    message = "Resource not found"


class NoteNotFound(NotFound):
    code = "NOTE_NOT_FOUND"
    message = "Note not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "DUPLICATE_ERROR"
    message = "Resource already exists"


class UserAlreadyExists(Conflict):
    code = "USER_ALREADY_EXISTS"
    message = "User already exists"
