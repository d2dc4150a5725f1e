"""
Organization Resolver
- Best-effort discovery of a company URL from job-page JSON-LD.
- Only JobPosting.hiringOrganization.sameAs / .url are consulted; an empty
  string means "no company page available", not an error.
"""
from __future__ import annotations

from typing import Any, Iterable, List


def _is_http_url(value: Any) -> bool:
    return isinstance(value, str) and value.strip().lower().startswith(("http://", "https://"))


def _is_job_posting(entry: dict) -> bool:
    types = entry.get("@type")
    # schema.org allows a list of types
    if isinstance(types, list):
        return "JobPosting" in types
    return types == "JobPosting"


def _entries(json_ld: Iterable[Any]) -> List[dict]:
    out: List[dict] = []
    for entry in json_ld:
        if not isinstance(entry, dict):
            continue
        out.append(entry)
        graph = entry.get("@graph")
        if isinstance(graph, list):
            out.extend(e for e in graph if isinstance(e, dict))
    return out


def _org_url(org: Any) -> str:
    if not isinstance(org, dict):
        return ""
    same_as = org.get("sameAs")
    if isinstance(same_as, list):
        same_as = next((s for s in same_as if _is_http_url(s)), None)
    for candidate in (same_as, org.get("url")):
        if _is_http_url(candidate):
            return candidate.strip()
    return ""


def resolve_company_url(json_ld: Iterable[Any]) -> str:
    """Return the first usable hiring-organization URL, or "" when there is none."""
    for entry in _entries(json_ld or []):
        if not _is_job_posting(entry):
            continue
        url = _org_url(entry.get("hiringOrganization"))
        if url:
            return url
    return ""
