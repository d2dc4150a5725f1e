import os
from pathlib import Path
from typing import Optional
from pydantic import BaseModel
from dotenv import load_dotenv

# Load environment variables from .env file, if present
_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(_ROOT / ".env")

def _first(*keys: str) -> Optional[str]:
    """
    Return the value of the first environment variable found in keys.
    """
    for key in keys:
        val = os.getenv(key)
        if val:
            return val
    return None

def _float(key: str, default: float) -> float:
    raw = os.getenv(key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default

class Settings(BaseModel):
    supabase_url: Optional[str] = os.getenv("SUPABASE_URL")
    supabase_anon_key: Optional[str] = os.getenv("SUPABASE_ANON_KEY")
    openai_api_key: Optional[str] = _first("OPENAI_API_KEY")
    openai_model: str = os.getenv("OPENAI_MODEL") or "gpt-4o-mini"
    fetch_timeout_seconds: float = _float("FETCH_TIMEOUT_SECONDS", 15.0)
    generation_timeout_seconds: float = _float("GENERATION_TIMEOUT_SECONDS", 60.0)
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    debug: bool = os.getenv("DEBUG", "false").lower() in ("1", "true", "yes")


# Singleton instance for app-wide settings
settings = Settings()
