"""Global exception handlers — map domain errors to HTTP responses.

Every response body is ``{"code": ..., "message": ...}``; no handler ever
echoes a credential or raw configuration value.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from keyrelay.domain.exceptions import (
    AggregatedError,
    ConfigurationError,
    DomainError,
    InvalidRequestError,
    SpeechProviderError,
    UpstreamResponseError,
)

logger = structlog.get_logger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all domain→HTTP exception mappings."""

    @app.exception_handler(ConfigurationError)
    async def handle_configuration(request: Request, exc: ConfigurationError) -> ORJSONResponse:
        logger.error("configuration_error_http", provider=exc.provider)
        return ORJSONResponse(
            status_code=500,
            content={"code": exc.code, "message": "Server configuration error"},
        )

    @app.exception_handler(AggregatedError)
    async def handle_exhausted(request: Request, exc: AggregatedError) -> ORJSONResponse:
        logger.error("all_keys_failed_http", provider=exc.provider, attempts=exc.attempts)
        return ORJSONResponse(
            status_code=500,
            content={"code": exc.code, "message": exc.message},
        )

    @app.exception_handler(UpstreamResponseError)
    async def handle_upstream_shape(
        request: Request, exc: UpstreamResponseError
    ) -> ORJSONResponse:
        logger.error("upstream_response_invalid_http", message=exc.message)
        return ORJSONResponse(
            status_code=502,
            content={"code": exc.code, "message": exc.message},
        )

    @app.exception_handler(InvalidRequestError)
    async def handle_invalid(request: Request, exc: InvalidRequestError) -> ORJSONResponse:
        return ORJSONResponse(
            status_code=400,
            content={"code": exc.code, "message": exc.message},
        )

    @app.exception_handler(SpeechProviderError)
    async def handle_speech(request: Request, exc: SpeechProviderError) -> ORJSONResponse:
        logger.error("speech_provider_error_http", message=exc.message)
        return ORJSONResponse(
            status_code=502,
            content={"code": exc.code, "message": exc.message},
        )

    @app.exception_handler(DomainError)
    async def handle_domain(request: Request, exc: DomainError) -> ORJSONResponse:
        return ORJSONResponse(
            status_code=400,
            content={"code": exc.code, "message": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        errors = exc.errors()
        detail = errors[0].get("msg", "Invalid request body") if errors else "Invalid request body"
        return ORJSONResponse(
            status_code=400,
            content={"code": "INVALID_REQUEST", "message": detail},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException) -> ORJSONResponse:
        return ORJSONResponse(
            status_code=exc.status_code,
            content={"code": f"HTTP_{exc.status_code}", "message": str(exc.detail)},
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception("unhandled_exception", error=str(exc))
        return ORJSONResponse(
            status_code=500,
            content={
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            },
        )
