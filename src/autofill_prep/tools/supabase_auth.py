from typing import Any, Dict, Optional

import requests

from autofill_prep.configuration import Settings
from autofill_prep.errors import AuthorizationError, ConfigurationError
from autofill_prep.logging_config import get_logger

logger = get_logger(__name__)


class SupabaseAuth:
    """Resolve the calling user from a bearer token via Supabase Auth (GoTrue).

    Construction never fails; missing configuration surfaces as
    ConfigurationError on first use so the route decides when to check it.
    """

    def __init__(
        self,
        url: Optional[str],
        anon_key: Optional[str],
        session: Optional[requests.Session] = None,
        timeout_seconds: float = 10.0,
    ):
        self.url = (url or "").rstrip("/")
        self.anon_key = anon_key or ""
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "SupabaseAuth":
        return cls(settings.supabase_url, settings.supabase_anon_key)

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def require_configured(self) -> None:
        if not self.url or not self.anon_key:
            raise ConfigurationError("Missing Supabase environment variables")

    def get_user(self, authorization: str) -> Dict[str, Any]:
        """Return the user record for ``authorization`` ("Bearer <jwt>")."""
        self.require_configured()
        try:
            resp = self.session.get(
                f"{self.url}/auth/v1/user",
                headers={"apikey": self.anon_key, "Authorization": authorization},
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            logger.warning("[auth] identity lookup failed: %s", exc)
            raise AuthorizationError() from exc

        if resp.status_code != 200:
            logger.info("[auth] token rejected status=%s", resp.status_code)
            raise AuthorizationError()
        try:
            user = resp.json()
        except ValueError as exc:
            raise AuthorizationError() from exc
        if not isinstance(user, dict) or not user.get("id"):
            raise AuthorizationError()
        return user
