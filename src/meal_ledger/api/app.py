"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from meal_ledger.api.meals import router as meals_router
from meal_ledger.api.normalize import error_response
from meal_ledger.api.normalize import router as normalize_router
from meal_ledger.app_logging import configure_logging
from meal_ledger.config import parse_allowed_origins
from meal_ledger.containers import AppContainer

CORS_ALLOWED_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Meal ledger starting (environment=%s)", container.settings.environment
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Meal Ledger", lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_allowed_origins(container.settings.cors_allowed_origins),
        allow_methods=["*"],
        allow_headers=CORS_ALLOWED_HEADERS,
    )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        response = error_response(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return error_response(
            status.HTTP_400_BAD_REQUEST, validation_message(exc.errors())
        )

    app.include_router(normalize_router)
    app.include_router(meals_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def validation_message(errors: list[dict[str, object]]) -> str:
    """Describe the first validation error as `field: reason`."""
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [
        str(part)
        for part in first.get("loc", ())
        if part not in {"body", "query", "path", "header"}
    ]
    reason = str(first.get("msg") or "Invalid value")
    if not location:
        return f"Invalid request: {reason}"
    return f"Invalid {'.'.join(location)}: {reason}"
