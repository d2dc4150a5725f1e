"""Liveness and readiness probes for the autofill service."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from autofill_prep.configuration import Settings

from ..deps import get_settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/ping", summary="Basic liveness check")
async def ping() -> Dict[str, str]:
    return {"status": "ok"}


@router.get("/ready", summary="Whether the credentials the endpoint needs are configured")
async def ready(cfg: Settings = Depends(get_settings)) -> Dict[str, Any]:
    # Report presence only; never echo secret values.
    identity = bool(cfg.supabase_url and cfg.supabase_anon_key)
    generation = bool(cfg.openai_api_key)
    return {
        "status": "ok" if identity and generation else "degraded",
        "identity": identity,
        "generation": generation,
        "model": cfg.openai_model,
    }
