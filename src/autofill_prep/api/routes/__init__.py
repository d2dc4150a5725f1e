"""Application routers."""

from fastapi import APIRouter

from . import autofill, health

api_router = APIRouter()
api_router.include_router(health.router, prefix="/api")
api_router.include_router(autofill.router)
