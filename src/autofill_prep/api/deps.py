"""FastAPI dependencies; tests swap these through ``app.dependency_overrides``."""

from typing import Callable, Iterator

from fastapi import Depends

from autofill_prep.agents.generator import AutofillGenerator
from autofill_prep.agents.page_fetcher import PageFetcher
from autofill_prep.configuration import Settings, settings
from autofill_prep.tools.supabase_auth import SupabaseAuth


def get_settings() -> Settings:
    return settings


def get_identity_verifier(cfg: Settings = Depends(get_settings)) -> Iterator[SupabaseAuth]:
    auth = SupabaseAuth.from_settings(cfg)
    try:
        yield auth
    finally:
        auth.close()


def get_page_fetcher(cfg: Settings = Depends(get_settings)) -> Iterator[PageFetcher]:
    fetcher = PageFetcher(timeout_seconds=cfg.fetch_timeout_seconds)
    try:
        yield fetcher
    finally:
        fetcher.close()


def get_generator_factory(
    cfg: Settings = Depends(get_settings),
) -> Callable[[], AutofillGenerator]:
    """Deferred so a missing API key is reported only after request validation."""
    return lambda: AutofillGenerator.from_settings(cfg)
