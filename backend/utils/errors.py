"""
Error taxonomy shared by repositories and routers.

Every error carries the HTTP status and machine-readable code used when it is
rendered through ``error_response``.
"""
from typing import Any, List, Optional


class AppError(Exception):
    status_code = 500
    error_code = "internal_error"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, data: Optional[Any] = None):
        self.message = message or self.default_message
        self.data = data
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = 400
    error_code = "bad_request"
    default_message = "Invalid request"


class UnauthorizedError(AppError):
    status_code = 401
    error_code = "unauthorized"
    default_message = "Invalid or expired token"


class ForbiddenError(AppError):
    status_code = 403
    error_code = "forbidden"
    default_message = "Insufficient permissions"


class NotFoundError(AppError):
    status_code = 404
    error_code = "not_found"
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    error_code = "conflict"
    default_message = "Resource conflict"


class InternalError(AppError):
    pass


def validation_error_fields(errors) -> List[dict]:
    """
    Flatten pydantic / FastAPI validation errors into ``{field, message}`` pairs.

    The request section prefix (``body``, ``query``, ``path``...) is dropped
    from the field location.
    """
    fields = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header", "cookie"):
            loc = loc[1:]
        fields.append({"field": ".".join(loc) or None, "message": error.get("msg", "Invalid value")})
    return fields
