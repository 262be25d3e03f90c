"""
Global exception handlers for the JSON API.

Not-found and not-available produce the same 404 body. Storage failures
never expose backend detail.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.exceptions import PasteUnavailableError, StorageError, ValidationError

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Paste not found"
INTERNAL_ERROR_MESSAGE = "Internal server error"


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(ValidationError)
    async def paste_validation_error_handler(request: Request, exc: ValidationError):
        logger.info(f"Rejected paste input on {request.url.path}: {exc.field}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": exc.message, "field": exc.field},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors with the same shape as ValidationError."""
        errors = exc.errors()
        field = None
        message = "Invalid request body"
        if errors:
            # ("body", "<field>", ...) for body errors
            loc = errors[0].get("loc", ())
            if len(loc) > 1:
                field = str(loc[1])
            message = f"{field}: {errors[0].get('msg')}" if field else errors[0].get("msg", message)
        logger.info(f"Validation error on {request.url.path}: {field}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": message, "field": field},
        )

    @app.exception_handler(PasteUnavailableError)
    async def paste_unavailable_handler(request: Request, exc: PasteUnavailableError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": NOT_FOUND_MESSAGE},
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"Storage error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR_MESSAGE},
        )
