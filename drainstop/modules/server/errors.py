"""JSON error contract of the HTTP API."""

from typing import Any, Optional

from aiohttp import web

from ..logging import BaseLogger

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class AppError(Exception):
    """Application error carrying an HTTP status and an optional error code."""

    def __init__(self, message: str, status_code: int = 500, code: Optional[str] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details


class Errors:
    """Common error factories."""

    @staticmethod
    def not_found(resource: str) -> AppError:
        return AppError(f"{resource} not found", 404, "NOT_FOUND")

    @staticmethod
    def unauthorized(message: str = "Authentication required") -> AppError:
        return AppError(message, 401, "UNAUTHORIZED")

    @staticmethod
    def forbidden(message: str = "Access denied") -> AppError:
        return AppError(message, 403, "FORBIDDEN")

    @staticmethod
    def bad_request(message: str, details: Any = None) -> AppError:
        return AppError(message, 400, "BAD_REQUEST", details)

    @staticmethod
    def conflict(message: str) -> AppError:
        return AppError(message, 409, "CONFLICT")

    @staticmethod
    def validation(message: str, details: Any = None) -> AppError:
        return AppError(message, 400, "VALIDATION_ERROR", details)

    @staticmethod
    def shutting_down() -> AppError:
        return AppError("Server is shutting down", 503, "SHUTTING_DOWN")


def error_response(error: Exception, context: str, logger: BaseLogger, production: bool = False) -> web.Response:
    """
    Log an error with its context and render it as a JSON response.

    AppError keeps its status and code. Anything else is a 500 whose
    message is hidden in production.
    """
    details = f" details={error.details!r}" if isinstance(error, AppError) and error.details is not None else ""
    logger.log_error(f"[{context}] Error: {str(error)}{details}")

    if isinstance(error, AppError):
        body = {"message": error.message}
        if error.code:
            body["code"] = error.code
        return web.json_response(body, status=error.status_code)

    message = UNEXPECTED_ERROR_MESSAGE if production else (str(error) or UNEXPECTED_ERROR_MESSAGE)
    return web.json_response({"message": message}, status=500)
