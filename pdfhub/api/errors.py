from flask import Flask, Response
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from pdfhub.api.responses import failure
from pdfhub.exceptions import AppError, FileUploadError
from pdfhub.logging.logger import Log


def register_error_handlers(app: Flask, debug: bool) -> None:
    """Map exceptions to JSON responses once, at the HTTP boundary."""

    @app.errorhandler(AppError)
    def handle_app_error(exc: AppError) -> tuple[Response, int]:
        if exc.status_code >= 500:
            Log.error(f"{type(exc).__name__}: {exc.message}")
        return failure(exc.message, exc.status_code)

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(exc: RequestEntityTooLarge) -> tuple[Response, int]:
        _ = exc
        error = FileUploadError("Upload exceeds the allowed size")
        return failure(error.message, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException) -> tuple[Response, int]:
        return failure(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception) -> tuple[Response, int]:
        Log.exception(f"Unhandled error: {exc}")
        if debug:
            return failure("Something went wrong!", 500, error=str(exc))
        return failure("Something went wrong!", 500)
