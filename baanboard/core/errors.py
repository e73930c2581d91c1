"""Domain errors. Each one knows the HTTP status it maps to."""

# Body text for any unexpected persistence failure; the cause is only logged.
STORE_FAILURE_MESSAGE = "Store failure"


class AppError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    message = "Invalid request"


class DuplicateEmailError(AppError):
    status_code = 400
    message = "Email already exists"


class InvalidCredentialError(AppError):
    status_code = 400
    message = "Invalid email or password"


class UnauthenticatedError(AppError):
    status_code = 401
    message = "No Token"


class InvalidTokenError(AppError):
    status_code = 403
    message = "Invalid Token"


class ForbiddenError(AppError):
    status_code = 403
    message = "Unauthorized"


class NotFoundError(AppError):
    status_code = 404
    message = "Not found"


class UnknownAccountError(NotFoundError):
    """No account for the given email. Rendered like a bad password so logins don't leak emails."""
    status_code = 400
    message = "Invalid email or password"


def describe_validation_errors(errors) -> str:
    """Flatten pydantic error dicts into one readable message."""
    parts = []
    for err in errors:
        field = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "form"))
        msg = err.get("msg", "Invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
    return "; ".join(parts) or ValidationError.message
