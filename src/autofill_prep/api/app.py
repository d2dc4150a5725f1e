"""Application factory for the autofill-prep FastAPI service."""

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from autofill_prep.errors import AutofillError, MethodNotAllowedError
from autofill_prep.logging_config import configure_logging

from .responses import error_response, json_response
from .routes import api_router


async def _autofill_error_handler(request: Request, exc: AutofillError):
    return error_response(exc)


async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    # Router-level rejections (unlisted verbs, unknown paths) get the same envelope.
    if exc.status_code == 405:
        return error_response(MethodNotAllowedError(), headers=exc.headers)
    return json_response({"error": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    configure_logging()
    app = FastAPI(
        title="Autofill Prep API",
        description="Turns job posting and company pages into a grounded application brief.",
        version="0.1.0",
    )

    app.include_router(api_router)
    app.add_exception_handler(AutofillError, _autofill_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)

    return app
