"""Service wrapper for running the autofill graph."""

from __future__ import annotations

from autofill_prep.agents.generator import AutofillGenerator
from autofill_prep.agents.page_fetcher import PageFetcher
from autofill_prep.graph import build_graph, run_pipeline
from autofill_prep.models import AutofillResult

from ..schemas.autofill import AutofillRequest

_GRAPH_APP = build_graph()


def run_autofill(
    request: AutofillRequest,
    fetcher: PageFetcher,
    generator: AutofillGenerator,
) -> AutofillResult:
    """Fetch, extract and summarize the pages named in ``request``."""
    state = {
        "job_url": request.job_url,
        "company_url": request.company_url,
        "language": request.language,
        "mode": request.mode,
        "company_name": request.company_name,
        "role_title": request.role_title,
    }
    return run_pipeline(_GRAPH_APP, state, fetcher=fetcher, generator=generator)
