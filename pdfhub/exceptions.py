class AppError(Exception):
    """Base exception for all errors surfaced to API callers."""

    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(AppError):
    """Raised when request input is malformed or missing."""

    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(AppError):
    """Raised when a request cannot be tied to an authenticated account."""

    status_code = 401
    default_message = "No authentication token, access denied"


class InvalidTokenError(AuthenticationError):
    """Raised for bad, expired, or already consumed tokens and assertions."""

    default_message = "Token is invalid or expired"


class InvalidResetTokenError(InvalidTokenError):
    """Raised for unknown, expired, or already used password-reset tokens."""

    status_code = 400
    default_message = "Invalid or expired reset token"


class AccountDeactivatedError(AuthenticationError):
    """Raised when a valid session belongs to a deactivated account."""

    default_message = "User account is deactivated"


class InvalidCredentialsError(AppError):
    """Raised when an email/password pair does not verify.

    Unknown email and wrong password both surface as this error.
    """

    status_code = 400
    default_message = "Invalid credentials"


class DuplicateEmailError(AppError):
    """Raised when registering an email that already has an account."""

    status_code = 400
    default_message = "User already exists"


class AuthorizationError(AppError):
    """Raised when the caller lacks the role or ownership for an action."""

    status_code = 403
    default_message = "Access denied. Insufficient permissions."


class QuotaExceededError(AppError):
    """Raised when an operation would push an account past its storage limit."""

    status_code = 403
    default_message = (
        "Storage limit reached. Please upgrade your plan or delete some files."
    )


class FileUploadError(AppError):
    """Raised for missing, oversized, or non-PDF uploads."""

    status_code = 400
    default_message = "File upload failed"


class ProcessingError(AppError):
    """Raised when a document cannot be decoded or transformed."""

    status_code = 400
    default_message = "Document could not be processed"


class NotFoundError(AppError):
    """Raised when a requested resource does not exist for the caller."""

    status_code = 404
    default_message = "Not found"
