"""
HTML Extractor
- Turns raw page content into a PageExtract: title, meta/Open Graph tags,
  JSON-LD blocks and a visible-text approximation.
- Pure and tolerant: malformed markup or JSON-LD degrades to empty fields,
  it never raises.
"""
from __future__ import annotations

import json
import re
import warnings
from typing import Any, List, Optional

from bs4 import BeautifulSoup, Comment, MarkupResemblesLocatorWarning

from autofill_prep.logging_config import get_logger
from autofill_prep.models import PageExtract

logger = get_logger(__name__)

# Job boards sometimes answer with bare text that looks like a URL or path.
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

MAX_TITLE_CHARS = 280
MAX_DESCRIPTION_CHARS = 1_200
MAX_TEXT_CHARS = 18_000

_BLOCK_TAGS = ["p", "div", "li", "h1", "h2", "h3", "h4", "h5", "h6", "section", "article", "tr", "td"]
_LD_JSON_RE = re.compile(r"^\s*application/ld\+json\s*$", re.I)
_HSPACE_RE = re.compile(r"[^\S\n]+")
_BLANK_RUN_RE = re.compile(r"\n{3,}")


def safe_slice(value: str, max_chars: int) -> str:
    if len(value) <= max_chars:
        return value
    return value[:max_chars]


def compact_whitespace(value: str) -> str:
    return " ".join(value.split())


def _meta(soup: BeautifulSoup, name: str) -> str:
    """Content of the first <meta name|property=...> with a non-empty value."""
    wanted = name.lower()
    for tag in soup.find_all("meta"):
        key = tag.get("name") or tag.get("property") or ""
        if not isinstance(key, str) or key.strip().lower() != wanted:
            continue
        content = tag.get("content")
        if isinstance(content, str) and content.strip():
            return compact_whitespace(content)
    return ""


def _title(soup: BeautifulSoup) -> str:
    tag = soup.find("title")
    if tag is None:
        return ""
    return compact_whitespace(tag.get_text())


def _json_ld(soup: BeautifulSoup) -> List[Any]:
    found: List[Any] = []
    for script in soup.find_all("script", attrs={"type": _LD_JSON_RE}):
        raw = script.get_text().strip()
        if not raw:
            continue
        try:
            parsed = json.loads(raw)
        except (ValueError, RecursionError):
            # Malformed or multi-document block; the rest of the page still counts.
            logger.debug("[extractor] skipping unparseable JSON-LD block (%d chars)", len(raw))
            continue
        if isinstance(parsed, list):
            found.extend(parsed)
        else:
            found.append(parsed)
    return found


def _visible_text(soup: BeautifulSoup) -> str:
    for tag in soup(["script", "style"]):
        tag.decompose()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for tag in soup.find_all(_BLOCK_TAGS):
        tag.append("\n")

    text = soup.get_text(" ").replace("\xa0", " ")
    lines = [_HSPACE_RE.sub(" ", line).strip() for line in text.split("\n")]
    return _BLANK_RUN_RE.sub("\n\n", "\n".join(lines)).strip()


def extract_page(raw: str, url: str = "", content_type: str = "") -> PageExtract:
    """Parse raw page content into a PageExtract with every field length-capped."""
    title = description = og_title = og_description = text = ""
    json_ld: List[Any] = []

    soup: Optional[BeautifulSoup]
    try:
        soup = BeautifulSoup(raw or "", "html.parser")
    except Exception as exc:  # html.parser is lenient, but the page is untrusted
        logger.warning("[extractor] could not parse %s: %r", url or "<page>", exc)
        soup = None

    if soup is not None:
        og_title = _meta(soup, "og:title")
        og_description = _meta(soup, "og:description")
        title = _title(soup) or og_title
        description = _meta(soup, "description") or og_description
        json_ld = _json_ld(soup)
        text = _visible_text(soup)

    return PageExtract(
        url=url,
        title=safe_slice(title, MAX_TITLE_CHARS),
        description=safe_slice(description, MAX_DESCRIPTION_CHARS),
        og_title=safe_slice(og_title, MAX_TITLE_CHARS),
        og_description=safe_slice(og_description, MAX_DESCRIPTION_CHARS),
        json_ld=json_ld,
        text=safe_slice(text, MAX_TEXT_CHARS),
        content_type=content_type,
    )
