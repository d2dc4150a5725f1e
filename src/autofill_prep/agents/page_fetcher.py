"""
Page Fetcher
- Given a URL, fetches the raw body with browser-like headers.
- Bounded by a wall-clock deadline and a character cap; non-HTML bodies are
  passed through as text.
"""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Optional

import requests

from autofill_prep.errors import FetchError, FetchTimeoutError
from autofill_prep.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0
MAX_RAW_CHARS = 120_000
# Worst case UTF-8 is 4 bytes per char; stop reading once the cap is certainly filled.
_MAX_RAW_BYTES = MAX_RAW_CHARS * 4
_CHUNK_SIZE = 16 * 1024

_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (X11; Linux x86_64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/121.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}


@dataclass(frozen=True)
class FetchedPage:
    final_url: str
    raw_content: str
    content_type: str

    @property
    def is_html(self) -> bool:
        return "text/html" in self.content_type.lower()


def _charset(content_type: str) -> Optional[str]:
    for part in content_type.split(";")[1:]:
        key, _, value = part.strip().partition("=")
        if key.lower() == "charset" and value:
            return value.strip("\"' ")
    return None


def _decode(body: bytes, content_type: str) -> str:
    # Without an explicit charset assume UTF-8 rather than the HTTP ISO-8859-1 default.
    encoding = _charset(content_type) or "utf-8"
    try:
        return body.decode(encoding, errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


class _Attempt:
    """One in-flight download; ``abort`` cuts it off from the waiting thread."""

    def __init__(self):
        self.page: Optional[FetchedPage] = None
        self.error: Optional[BaseException] = None
        self.aborted = False
        self._resp = None
        self._lock = threading.Lock()

    def attach(self, resp) -> bool:
        with self._lock:
            if self.aborted:
                return False
            self._resp = resp
            return True

    def abort(self) -> None:
        with self._lock:
            self.aborted = True
            resp = self._resp
        if resp is not None:
            resp.close()


class PageFetcher:
    """Fetch one page per call. Holds no state between calls besides the HTTP session.

    The wall-clock budget covers the whole exchange (connect, headers and body).
    The download runs on a worker thread; when the budget runs out the caller
    gets FetchTimeoutError straight away and the in-flight response is closed.
    """

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        max_chars: int = MAX_RAW_CHARS,
    ):
        self.timeout_seconds = timeout_seconds
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.max_chars = max_chars

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def fetch(self, url: str, timeout_seconds: Optional[float] = None) -> FetchedPage:
        timeout = self.timeout_seconds if timeout_seconds is None else timeout_seconds
        started = time.monotonic()
        logger.info("[fetcher] GET %s timeout=%ss", url, timeout)

        attempt = _Attempt()
        worker = threading.Thread(
            target=self._run,
            args=(url, timeout, started + timeout, attempt),
            name="page-fetch",
            daemon=True,
        )
        worker.start()
        worker.join(timeout)

        if worker.is_alive():
            attempt.abort()
            logger.warning("[fetcher] deadline hit after %.2fs: %s", time.monotonic() - started, url)
            raise FetchTimeoutError(f"Fetch timed out after {timeout:g}s: {url}")
        if attempt.error is not None:
            raise attempt.error

        page = attempt.page
        if not page.is_html:
            # Some job boards answer with JSON or plain text; pass it through.
            logger.info("[fetcher] non-HTML content-type=%r for %s", page.content_type, page.final_url)
        logger.info(
            "[fetcher] done url=%s chars=%d elapsed=%.2fs",
            page.final_url,
            len(page.raw_content),
            time.monotonic() - started,
        )
        return page

    def _run(self, url: str, timeout: float, deadline: float, attempt: _Attempt) -> None:
        try:
            attempt.page = self._download(url, timeout, deadline, attempt)
        except Exception as exc:  # handed to the waiting thread, which re-raises it
            attempt.error = exc

    def _download(self, url: str, timeout: float, deadline: float, attempt: _Attempt) -> FetchedPage:
        try:
            resp = self.session.get(
                url,
                headers=_HEADERS,
                allow_redirects=True,
                stream=True,
                timeout=timeout,
            )
        except requests.Timeout as exc:
            raise FetchTimeoutError(f"Fetch timed out after {timeout:g}s: {url}") from exc
        except requests.RequestException as exc:
            raise FetchError(f"Fetch failed: {exc}") from exc

        try:
            if not attempt.attach(resp):
                raise FetchTimeoutError(f"Fetch timed out after {timeout:g}s: {url}")
            content_type = resp.headers.get("content-type", "") or ""
            if not resp.ok:
                raise FetchError(f"Fetch failed ({resp.status_code})")

            chunks: list[bytes] = []
            size = 0
            try:
                for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                    if attempt.aborted or time.monotonic() > deadline:
                        raise FetchTimeoutError(f"Fetch timed out after {timeout:g}s: {url}")
                    if not chunk:
                        continue
                    chunks.append(chunk)
                    size += len(chunk)
                    if size >= _MAX_RAW_BYTES:
                        break
            except requests.Timeout as exc:
                raise FetchTimeoutError(f"Fetch timed out after {timeout:g}s: {url}") from exc
            except requests.RequestException as exc:
                raise FetchError(f"Fetch failed: {exc}") from exc

            raw = _decode(b"".join(chunks), content_type)
            if len(raw) > self.max_chars:
                raw = raw[: self.max_chars]
            return FetchedPage(final_url=resp.url or url, raw_content=raw, content_type=content_type)
        finally:
            resp.close()
