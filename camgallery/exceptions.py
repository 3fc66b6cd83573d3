from typing import Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class StorageError(OSError):
    """Raised by storage backends when a read, write or delete cannot complete."""


class ImageNotFound(StorageError):
    def __init__(self, name: str):
        super().__init__(f"Image not found: {name}")
        self.name = name


class APIException(HTTPException):
    status_code_default = 500
    message_default = "Internal server error"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(status_code=status_code or self.status_code_default, detail=message or self.message_default)
        self.error = error


class BadRequestError(APIException):
    status_code_default = 400
    message_default = "Bad request"


class PayloadTooLargeError(APIException):
    status_code_default = 413
    message_default = "File too large"


class NotFoundError(APIException):
    status_code_default = 404
    message_default = "File not found"


class InternalError(APIException):
    status_code_default = 500


def create_error_response(message: str, error: Optional[str] = None) -> dict:
    """Create a standardized error response"""
    body = {
        "success": False,
        "message": message,
    }
    if error is not None:
        body["error"] = error
    return body


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render every HTTPException with the shared error body"""
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(str(exc.detail), getattr(exc, "error", None)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed requests are client errors with the shared error body.

    A ``photo`` part that is not a usable file (text value, empty filename)
    is reported the same way as a missing one.
    """
    errors = exc.errors()
    if any(tuple(err.get("loc", ()))[-1:] == ("photo",) for err in errors):
        return JSONResponse(status_code=400, content=create_error_response("No file received"))
    detail = "; ".join(f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in errors)
    return JSONResponse(status_code=400, content=create_error_response("Invalid request", detail))
