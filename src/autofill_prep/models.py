"""Records passed between pipeline stages and the strict generation contract."""
from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# ---------------- Page records ----------------

class PageExtract(BaseModel):
    """Normalized, plain-text view of one fetched page."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    url: str = ""
    title: str = ""
    description: str = ""
    og_title: str = ""
    og_description: str = ""
    json_ld: List[Any] = Field(default_factory=list)
    text: str = ""
    content_type: str = Field("", exclude=True)

# ---------------- Generation contract ----------------

class _Strict(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        strict=True,
    )


class CompanyBrief(_Strict):
    one_liner: str
    product_market: str
    motivation: str
    research_checklist: str
    links: str


class RoleBrief(_Strict):
    summary: str
    requirements: str
    fit: str


class JDBrief(_Strict):
    keywords: List[str]


class Sources(_Strict):
    job_url: str
    company_url: str


class AutofillResult(_Strict):
    """Structured brief returned by the generator. Every key is required."""

    company: CompanyBrief
    role: RoleBrief
    jd: JDBrief
    sources: Sources
    warnings: List[str]

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def _object(properties: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "object",
        "additionalProperties": False,
        "properties": properties,
        "required": list(properties),
    }


_STRING = {"type": "string"}
_STRING_LIST = {"type": "array", "items": {"type": "string"}}

# JSON schema handed to the model; mirrors AutofillResult key for key.
AUTOFILL_SCHEMA: Dict[str, Any] = {
    "name": "autofill_prep",
    "strict": True,
    "schema": _object({
        "company": _object({
            "oneLiner": _STRING,
            "productMarket": _STRING,
            "motivation": _STRING,
            "researchChecklist": _STRING,
            "links": _STRING,
        }),
        "role": _object({
            "summary": _STRING,
            "requirements": _STRING,
            "fit": _STRING,
        }),
        "jd": _object({"keywords": _STRING_LIST}),
        "sources": _object({
            "jobUrl": _STRING,
            "companyUrl": _STRING,
        }),
        "warnings": _STRING_LIST,
    }),
}
