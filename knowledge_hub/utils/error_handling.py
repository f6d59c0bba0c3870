"""
Centralized error handling for the application.

Per-video and per-channel errors (ResolutionError, FeedError,
TranscriptUnavailable, PathTraversalError) are caught by the ingestion
pipeline and folded into its report. Request-level errors are turned into
JSON error responses by the handlers registered here.
"""

from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from knowledge_hub.utils.logger import logging


class KnowledgeHubError(Exception):
    """Base class for all application errors."""

    status_code = 500


class AuthError(KnowledgeHubError):
    """Missing or invalid credential."""

    status_code = 401


class ConfigurationError(KnowledgeHubError):
    """A secret or setting the request needs is not configured."""

    status_code = 500


class InputValidationError(KnowledgeHubError):
    """Malformed request input."""

    status_code = 400


class ResolutionError(KnowledgeHubError):
    """A channel handle could not be resolved to a channel id."""


class FeedError(KnowledgeHubError):
    """A channel feed could not be fetched or parsed."""


class TranscriptUnavailable(KnowledgeHubError):
    """A video has no retrievable caption track."""


class PathTraversalError(KnowledgeHubError):
    """A computed storage path escaped the storage root."""


class SummarizationError(KnowledgeHubError):
    """The summarization model failed or returned an unusable reply."""


class IngestionTimeout(KnowledgeHubError):
    """An ingestion run did not finish before its deadline."""

    status_code = 504


def format_validation_errors(errors: List[Dict[str, Any]]) -> str:
    """
    Flatten pydantic/FastAPI validation errors into one message.

    Args:
        errors: Error dicts as returned by ``exc.errors()``

    Returns:
        Comma separated ``field.path: message`` pairs
    """
    messages = []
    for error in errors:
        # Drop the leading "body"/"query" location marker
        location = [str(part) for part in error.get("loc", ())[1:]]
        messages.append(f"{'.'.join(location)}: {error.get('msg', 'invalid value')}")
    return ", ".join(messages) or "Validation failed"


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install JSON error handlers for the application error taxonomy."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Schema failures are client errors and are reported as 400."""
        return _error_response(400, format_validation_errors(exc.errors()))

    @app.exception_handler(InputValidationError)
    async def input_validation_handler(request: Request, exc: InputValidationError):
        return _error_response(400, str(exc))

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        logging.warning(f"Rejected request to {request.url.path}: {exc}")
        return _error_response(401, str(exc))

    @app.exception_handler(KnowledgeHubError)
    async def application_error_handler(request: Request, exc: KnowledgeHubError):
        logging.error(f"{type(exc).__name__} on {request.url.path}: {exc}")
        return _error_response(exc.status_code, str(exc))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled exceptions."""
        logging.exception(f"Unhandled error on {request.url.path}")
        return _error_response(500, f"An unexpected error occurred: {str(exc)}")
