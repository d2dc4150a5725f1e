from __future__ import annotations

import json
import time
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda

from autofill_prep.agents.generator import AutofillGenerator
from autofill_prep.agents.page_fetcher import FetchedPage
from autofill_prep.api.app import create_app
from autofill_prep.api.deps import (
    get_generator_factory,
    get_identity_verifier,
    get_page_fetcher,
)
from autofill_prep.errors import AuthorizationError

JOB_URL = "https://boards.example.com/jobs/123"

JOB_HTML = """<!doctype html>
<html>
<head>
  <title>Backend Intern at Acme | LinkedIn</title>
  <meta name="description" content="Join Acme as a backend intern.">
  <meta property="og:title" content="Backend Intern">
  <script type="application/ld+json">
  {"@context": "https://schema.org", "@type": "JobPosting", "title": "Backend Intern",
   "hiringOrganization": {"@type": "Organization", "name": "Acme", "sameAs": "https://acme.com"}}
  </script>
</head>
<body><h1>Backend Intern</h1><p>Build APIs in Python.</p></body>
</html>"""

COMPANY_HTML = """<html><head><title>Acme - Rockets for everyone</title>
<meta name="description" content="Acme builds rockets."></head>
<body><p>We build rockets.</p></body></html>"""


def make_result(**overrides: Any) -> Dict[str, Any]:
    result = {
        "company": {
            "oneLiner": "Acme builds rockets.",
            "productMarket": "Consumer rockets",
            "motivation": "",
            "researchChecklist": "- Read the engineering blog",
            "links": "https://acme.com",
        },
        "role": {
            "summary": "Backend intern building APIs.",
            "requirements": "- Python",
            "fit": "",
        },
        "jd": {"keywords": ["Python", "APIs"]},
        "sources": {"jobUrl": JOB_URL, "companyUrl": "https://acme.com"},
        "warnings": [],
    }
    result.update(overrides)
    return result


def structured_response(result: Any = None, content: Any = "", **extra_kwargs: Any) -> Dict[str, Any]:
    """Shape returned by ``with_structured_output(..., include_raw=True)``."""
    return {
        "raw": AIMessage(content=content, additional_kwargs=extra_kwargs),
        "parsed": result,
        "parsing_error": None,
    }


class FakeChatModel:
    """Stands in for ChatOpenAI; records the messages it was asked to complete."""

    def __init__(self, response: Any = None, error: Optional[Exception] = None):
        self.response = response if response is not None else structured_response(make_result())
        self.error = error
        self.calls: List[list] = []
        self.schema: Any = None
        self.structured_kwargs: Dict[str, Any] = {}

    def with_structured_output(self, schema: Any, **kwargs: Any):
        self.schema = schema
        self.structured_kwargs = kwargs

        def _complete(prompt_value):
            self.calls.append(prompt_value.to_messages())
            if self.error is not None:
                raise self.error
            return self.response

        return RunnableLambda(_complete)

    @property
    def last_payload(self) -> Dict[str, Any]:
        return json.loads(self.calls[-1][1].content)


class FakeFetcher:
    def __init__(self, pages: Optional[Dict[str, Any]] = None):
        self.pages = pages or {}
        self.calls: List[str] = []

    def fetch(self, url: str, timeout_seconds: Optional[float] = None) -> FetchedPage:
        self.calls.append(url)
        page = self.pages[url]
        if isinstance(page, Exception):
            raise page
        if isinstance(page, FetchedPage):
            return page
        return FetchedPage(final_url=url, raw_content=page, content_type="text/html; charset=utf-8")


class FakeIdentity:
    def __init__(self, valid: bool = True):
        self.valid = valid
        self.calls: List[str] = []

    def require_configured(self) -> None:
        return None

    def get_user(self, authorization: str) -> Dict[str, Any]:
        self.calls.append(authorization)
        if not self.valid:
            raise AuthorizationError()
        return {"id": "user-1", "email": "dev@example.com"}


class FakeResponse:
    def __init__(
        self,
        body: bytes = b"",
        status_code: int = 200,
        headers: Optional[Dict[str, str]] = None,
        url: str = "",
        chunks: Optional[List[bytes]] = None,
        chunk_delay: float = 0.0,
        json_data: Any = None,
    ):
        self.body = body
        self.status_code = status_code
        self.headers = headers or {"content-type": "text/html; charset=utf-8"}
        self.url = url
        self.chunks = chunks
        self.chunk_delay = chunk_delay
        self.json_data = json_data
        self.closed = False

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def iter_content(self, chunk_size: int = 1):
        chunks = self.chunks
        if chunks is None:
            chunks = [self.body[i:i + chunk_size] for i in range(0, len(self.body), chunk_size)]
        for chunk in chunks:
            if self.chunk_delay:
                time.sleep(self.chunk_delay)
            yield chunk

    def json(self) -> Any:
        if self.json_data is None:
            raise ValueError("no JSON body")
        return self.json_data

    def close(self) -> None:
        self.closed = True


class FakeSession:
    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.calls: List[tuple] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def chat_model() -> FakeChatModel:
    return FakeChatModel()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher({JOB_URL: JOB_HTML, "https://acme.com": COMPANY_HTML})


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity()


@pytest.fixture
def app(chat_model, fetcher, identity):
    application = create_app()
    application.dependency_overrides[get_identity_verifier] = lambda: identity
    application.dependency_overrides[get_page_fetcher] = lambda: fetcher
    application.dependency_overrides[get_generator_factory] = lambda: (
        lambda: AutofillGenerator(api_key="sk-test", llm=chat_model)
    )
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"Authorization": "Bearer test-token"}
