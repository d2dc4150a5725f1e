"""Autofill pipeline as a LangGraph state machine.

fetch_job -> resolve_company -> [fetch_company] -> compose -> generate

Collaborators (page fetcher, generator) arrive per invocation through
``config["configurable"]`` so the compiled graph itself holds no state.
"""
import json
import sys
from typing import Any, Dict, List, Optional, TypedDict

from langchain_core.runnables import RunnableConfig
from langgraph.graph import StateGraph, END

from .agents.generator import AutofillGenerator
from .agents.html_extractor import extract_page
from .agents.org_resolver import resolve_company_url
from .agents.page_fetcher import PageFetcher
from .agents.prompt_composer import ComposedPrompt, compose_prompt
from .logging_config import get_logger
from .models import AutofillResult, PageExtract

logger = get_logger(__name__)

_WARNINGS = {
    "en": {
        "no_company": "No company URL was provided or found on the job page; company fields rely on the job posting only.",
        "non_html": "The job page did not return HTML ({content_type}); extraction may be incomplete.",
    },
    "ko": {
        "no_company": "회사 URL이 제공되지 않았고 채용공고에서도 찾지 못해, 회사 정보는 채용공고만을 근거로 작성되었습니다.",
        "non_html": "채용공고 페이지가 HTML이 아닙니다({content_type}). 추출 결과가 불완전할 수 있습니다.",
    },
}


class AutofillState(TypedDict, total=False):
    job_url: str
    company_url: str
    language: str
    mode: str
    company_name: str
    role_title: str

    job_page: PageExtract
    target_company_url: str
    company_page: Optional[PageExtract]
    prompt: ComposedPrompt
    notes: List[str]
    result: AutofillResult


def _fetcher(config: RunnableConfig) -> PageFetcher:
    return config["configurable"]["fetcher"]


def _generator(config: RunnableConfig) -> AutofillGenerator:
    return config["configurable"]["generator"]


def _fetch_and_extract(fetcher: PageFetcher, url: str) -> PageExtract:
    fetched = fetcher.fetch(url)
    return extract_page(fetched.raw_content, url=fetched.final_url, content_type=fetched.content_type)


def _note(state: AutofillState, key: str, **kwargs: Any) -> None:
    messages = _WARNINGS.get(state.get("language") or "en", _WARNINGS["en"])
    state.setdefault("notes", []).append(messages[key].format(**kwargs))

# ---------------- Nodes ----------------

def fetch_job(state: AutofillState, config: RunnableConfig) -> AutofillState:
    page = _fetch_and_extract(_fetcher(config), state["job_url"])
    state["job_page"] = page
    if page.content_type and "text/html" not in page.content_type.lower():
        _note(state, "non_html", content_type=page.content_type)
    return state


def resolve_company(state: AutofillState) -> AutofillState:
    if state.get("mode") == "role":
        state["target_company_url"] = ""
        return state

    explicit = (state.get("company_url") or "").strip()
    target = explicit or resolve_company_url(state["job_page"].json_ld)
    if target and not explicit:
        logger.info("[graph] company url inferred from JSON-LD: %s", target)
    if not target:
        _note(state, "no_company")
    state["target_company_url"] = target
    return state


def route_company(state: AutofillState) -> str:
    if state.get("mode") != "role" and state.get("target_company_url"):
        return "fetch_company"
    return "compose"


def fetch_company(state: AutofillState, config: RunnableConfig) -> AutofillState:
    state["company_page"] = _fetch_and_extract(_fetcher(config), state["target_company_url"])
    return state


def compose(state: AutofillState) -> AutofillState:
    state["prompt"] = compose_prompt(
        mode=state.get("mode") or "both",
        language=state.get("language") or "en",
        company_name=state.get("company_name") or "",
        role_title=state.get("role_title") or "",
        job_page=state["job_page"],
        company_page=state.get("company_page"),
    )
    return state


def generate(state: AutofillState, config: RunnableConfig) -> AutofillState:
    prompt = state["prompt"]
    result = _generator(config).generate(prompt.system_prompt, prompt.user_payload)

    # Echo the URLs that were actually fetched, not what the model claims.
    company_page = state.get("company_page")
    result.sources.job_url = state["job_page"].url
    result.sources.company_url = company_page.url if company_page else ""
    for note in state.get("notes") or []:
        if note not in result.warnings:
            result.warnings.append(note)

    state["result"] = result
    return state


def build_graph():
    g = StateGraph(AutofillState)
    g.add_node("fetch_job", fetch_job)
    g.add_node("resolve_company", resolve_company)
    g.add_node("fetch_company", fetch_company)
    g.add_node("compose", compose)
    g.add_node("generate", generate)

    g.set_entry_point("fetch_job")
    g.add_edge("fetch_job", "resolve_company")
    g.add_conditional_edges(
        "resolve_company",
        route_company,
        {"fetch_company": "fetch_company", "compose": "compose"},
    )
    g.add_edge("fetch_company", "compose")
    g.add_edge("compose", "generate")
    g.add_edge("generate", END)

    return g.compile()


def run_pipeline(
    app,
    request: Dict[str, Any],
    fetcher: PageFetcher,
    generator: AutofillGenerator,
) -> AutofillResult:
    out = app.invoke(
        dict(request),
        config={"configurable": {"fetcher": fetcher, "generator": generator}},
    )
    return out["result"]


if __name__ == "__main__":
    from .configuration import settings

    if len(sys.argv) < 2:
        print("usage: python -m autofill_prep.graph <job_url> [company_url] [company|role|both] [en|ko]")
        sys.exit(2)
    args = sys.argv[1:] + [""] * 3
    request = {
        "job_url": args[0],
        "company_url": args[1],
        "mode": args[2] if args[2] in ("company", "role") else "both",
        "language": "ko" if args[3] == "ko" else "en",
        "company_name": "",
        "role_title": "",
    }
    result = run_pipeline(
        build_graph(),
        request,
        fetcher=PageFetcher(timeout_seconds=settings.fetch_timeout_seconds),
        generator=AutofillGenerator.from_settings(settings),
    )
    print(json.dumps(result.to_payload(), ensure_ascii=False, indent=2))
