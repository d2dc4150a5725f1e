"""Endpoint that turns a job posting URL into a structured application brief."""

import json
from typing import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from autofill_prep.agents.generator import AutofillGenerator
from autofill_prep.agents.page_fetcher import PageFetcher
from autofill_prep.errors import (
    AutofillError,
    AuthorizationError,
    InvalidRequestError,
    MethodNotAllowedError,
)
from autofill_prep.logging_config import get_logger
from autofill_prep.tools.supabase_auth import SupabaseAuth

from ..deps import get_generator_factory, get_identity_verifier, get_page_fetcher
from ..responses import json_response, preflight_response
from ..schemas.autofill import AutofillRequest, ErrorResponse
from ..services.autofill_service import run_autofill

logger = get_logger(__name__)

router = APIRouter(tags=["autofill"])


async def _parse_body(request: Request) -> AutofillRequest:
    try:
        body = json.loads(await request.body())
    except ValueError as exc:
        raise InvalidRequestError("Invalid JSON body") from exc
    if not isinstance(body, dict):
        raise InvalidRequestError("Invalid JSON body")

    payload = AutofillRequest.model_validate(body)
    if not payload.job_url:
        raise InvalidRequestError("jobUrl is required")
    return payload


@router.api_route(
    "/autofill-prep",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    summary="Summarize a job posting (and company page) into a structured brief",
    responses={
        400: {"model": ErrorResponse, "description": "Malformed body or missing jobUrl"},
        401: {"model": ErrorResponse, "description": "Missing or rejected bearer token"},
        405: {"model": ErrorResponse, "description": "Only POST (and OPTIONS preflight) are served"},
        500: {"model": ErrorResponse, "description": "Configuration, fetch or generation failure"},
    },
)
async def autofill_prep(
    request: Request,
    identity: SupabaseAuth = Depends(get_identity_verifier),
    fetcher: PageFetcher = Depends(get_page_fetcher),
    generator_factory: Callable[[], AutofillGenerator] = Depends(get_generator_factory),
) -> Response:
    """Validate the caller and request, then run the fetch/extract/generate pipeline.

    Every outcome is a JSON object; failures are ``{"error": "..."}`` with the
    status carried by the raised AutofillError.
    """
    if request.method == "OPTIONS":
        return preflight_response()
    if request.method != "POST":
        raise MethodNotAllowedError()

    identity.require_configured()
    authorization = request.headers.get("Authorization") or ""
    if not authorization.startswith("Bearer "):
        raise AuthorizationError()
    await run_in_threadpool(identity.get_user, authorization)

    payload = await _parse_body(request)
    generator = generator_factory()

    logger.info("[autofill] start mode=%s language=%s job_url=%s", payload.mode, payload.language, payload.job_url)
    try:
        result = await run_in_threadpool(run_autofill, payload, fetcher, generator)
    except AutofillError as exc:
        logger.warning("[autofill] failed status=%s error=%s", exc.status_code, exc.message)
        raise
    except Exception as exc:
        logger.exception("[autofill] unexpected failure")
        raise AutofillError(str(exc) or "Unknown error") from exc

    return json_response(result.to_payload())
