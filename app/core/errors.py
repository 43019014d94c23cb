"""
Domain error taxonomy.

Core services raise these and never map them to HTTP themselves; the
exception handler in ``app.main`` turns each kind into a status code.
"""


class AppError(Exception):
    """Base class for all domain failures."""

    default_message = "Application error"
    error_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str | None = None, error_code: str | None = None):
        self.message = message or self.default_message
        if error_code is not None:
            self.error_code = error_code
        super().__init__(self.message)


class NotFoundError(AppError):
    default_message = "Resource not found"
    error_code = "RESOURCE_NOT_FOUND"


class WorkspaceNotFoundError(NotFoundError):
    default_message = "Workspace not found"


class ForbiddenError(AppError):
    default_message = "You do not have the permission to perform this action"
    error_code = "ACCESS_UNAUTHORIZED"


class NotAMemberError(ForbiddenError):
    default_message = "You are not a member of this workspace"


class ConflictError(AppError):
    default_message = "Resource already exists"
    error_code = "CONFLICT"


class EmailAlreadyExistsError(ConflictError):
    default_message = "Email already exists"
    error_code = "AUTH_EMAIL_ALREADY_EXISTS"


class AlreadyMemberError(ConflictError):
    default_message = "You are already a member of this workspace"
    error_code = "ALREADY_MEMBER"


class InvalidReferenceError(AppError):
    default_message = "Invalid reference"
    error_code = "INVALID_REFERENCE"


class UnauthorizedError(AppError):
    default_message = "Unauthorized access"
    error_code = "AUTH_UNAUTHORIZED_ACCESS"


class ConfigurationError(AppError):
    """Deployment problem such as missing seed data. Not a user error."""

    default_message = "Server misconfiguration"
    error_code = "CONFIGURATION_ERROR"


class RoleNotFoundError(ConfigurationError):
    error_code = "ROLE_NOT_FOUND"

    def __init__(self, role_name: str):
        self.role_name = role_name
        super().__init__(f"{role_name} role not found")
