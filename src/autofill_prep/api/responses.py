"""Uniform JSON envelope with the CORS headers the browser client needs."""

from typing import Any, Mapping, Optional

from fastapi.responses import JSONResponse, PlainTextResponse

from autofill_prep.errors import AutofillError

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def json_response(
    data: Any,
    status_code: int = 200,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    merged = dict(headers or {})
    merged.update(CORS_HEADERS)
    return JSONResponse(content=data, status_code=status_code, headers=merged)


def error_response(exc: AutofillError, headers: Optional[Mapping[str, str]] = None) -> JSONResponse:
    return json_response({"error": exc.message or "Unknown error"}, status_code=exc.status_code, headers=headers)


def preflight_response() -> PlainTextResponse:
    return PlainTextResponse("ok", status_code=200, headers=dict(CORS_HEADERS))
