"""
Schema-Constrained Generator
- Calls the chat model with a strict JSON-schema response format and returns
  a validated AutofillResult.
- No partial results: empty output, unparseable JSON or a shape mismatch all
  fail the whole call with GenerationError.
"""
from __future__ import annotations

import copy
import json
from typing import Any, Dict, Optional

from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI
from pydantic import ValidationError

from autofill_prep.configuration import Settings
from autofill_prep.errors import ConfigurationError, GenerationError
from autofill_prep.logging_config import get_logger
from autofill_prep.models import AUTOFILL_SCHEMA, AutofillResult

logger = get_logger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
TEMPERATURE = 0.2
MAX_OUTPUT_TOKENS = 1_200
DEFAULT_TIMEOUT_SECONDS = 60.0

# Values are substituted verbatim, so braces in page JSON are safe here.
_PROMPT = ChatPromptTemplate.from_messages([
    ("system", "{system}"),
    ("human", "{payload}"),
])

# ---------------- Response envelope ----------------

def _message_text(message: Any) -> str:
    """Generated text from a chat message, whether content is a string or content blocks."""
    content = getattr(message, "content", None)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") in ("text", "output_text"):
                text = block.get("text")
                if isinstance(text, str):
                    parts.append(text)
        return "".join(parts)
    return ""


def _extract_payload(response: Any) -> Any:
    if not isinstance(response, dict):
        # Structured runnable returned the parsed object directly
        return response
    parsed = response.get("parsed")
    if parsed is not None:
        return parsed

    raw = response.get("raw")
    extra = getattr(raw, "additional_kwargs", None) or {}
    if extra.get("refusal"):
        raise GenerationError(f"Model refused: {extra['refusal']}")
    if isinstance(extra.get("parsed"), dict):
        return extra["parsed"]

    text = _message_text(raw)
    if not text.strip():
        raise GenerationError("Empty model response")
    try:
        return json.loads(text)
    except ValueError as exc:
        raise GenerationError("Failed to parse model JSON") from exc

# ---------------- Generator ----------------

class AutofillGenerator:
    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        llm: Any = None,
    ):
        if not api_key:
            raise ConfigurationError("Missing OPENAI_API_KEY secret")
        self.model = model
        self._llm = llm or ChatOpenAI(
            model=model,
            api_key=api_key,
            temperature=TEMPERATURE,
            max_tokens=MAX_OUTPUT_TOKENS,
            timeout=timeout_seconds,
            max_retries=0,
        )

    @classmethod
    def from_settings(cls, settings: Settings, llm: Any = None) -> "AutofillGenerator":
        return cls(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout_seconds=settings.generation_timeout_seconds,
            llm=llm,
        )

    def generate(
        self,
        system_prompt: str,
        user_payload: str,
        schema: Dict[str, Any] = AUTOFILL_SCHEMA,
    ) -> AutofillResult:
        structured = self._llm.with_structured_output(
            copy.deepcopy(schema),
            method="json_schema",
            strict=True,
            include_raw=True,
        )
        chain = _PROMPT | structured

        logger.info("[generator] start model=%s payload_chars=%d", self.model, len(user_payload))
        try:
            response = chain.invoke({"system": system_prompt, "payload": user_payload})
        except Exception as exc:
            message = getattr(exc, "message", None) or str(exc) or "OpenAI request failed"
            logger.warning("[generator] upstream call failed: %s", message)
            raise GenerationError(message) from exc

        payload = _extract_payload(response)
        if not isinstance(payload, dict):
            raise GenerationError("Model output is not a JSON object")
        try:
            result = AutofillResult.model_validate(payload)
        except ValidationError as exc:
            logger.warning("[generator] schema mismatch: %d error(s)", exc.error_count())
            raise GenerationError("Model output does not match the autofill schema") from exc

        logger.info("[generator] done keywords=%d warnings=%d", len(result.jd.keywords), len(result.warnings))
        return result
