"""Request and response models for the autofill endpoint."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Language = Literal["en", "ko"]
AutofillMode = Literal["company", "role", "both"]


class AutofillRequest(BaseModel):
    """Client input. Unknown enum values fall back to defaults instead of failing."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    job_url: str = Field("", description="Job posting URL to fetch (required, non-empty).")
    company_url: str = Field("", description="Explicit company URL; inferred from JSON-LD when empty.")
    language: Language = Field("en", description="Output language.")
    mode: AutofillMode = Field("both", description="Which sections of the brief to fill.")
    company_name: str = Field("", description="Caller hint, not verified fact.")
    role_title: str = Field("", description="Caller hint, not verified fact.")

    @field_validator("job_url", "company_url", "company_name", "role_title", mode="before")
    @classmethod
    def _trimmed(cls, value: Any) -> str:
        return value.strip() if isinstance(value, str) else ""

    @field_validator("language", mode="before")
    @classmethod
    def _language(cls, value: Any) -> str:
        return "ko" if value == "ko" else "en"

    @field_validator("mode", mode="before")
    @classmethod
    def _mode(cls, value: Any) -> str:
        return value if value in ("company", "role") else "both"


class ErrorResponse(BaseModel):
    error: str
