from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from masecurite.core.constants import CONTACT_DEFAULT_RECIPIENTS


def _optional(name: str) -> str | None:
    value = (os.getenv(name) or "").strip()
    return value or None


def _csv(name: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in (os.getenv(name) or "").split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """
    Process configuration, read once from the environment.

    Routes receive it through `Depends(get_settings)`; tests swap it with
    `app.dependency_overrides`.
    """

    hibp_api_key: str | None = None
    leakcheck_api_key: str | None = None
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    resend_api_key: str | None = None
    contact_recipients: tuple[str, ...] = CONTACT_DEFAULT_RECIPIENTS
    supabase_url: str | None = None
    supabase_service_role_key: str | None = None
    http_timeout: float = 8.0

    @classmethod
    def from_env(cls) -> "Settings":
        timeout_raw = _optional("HTTP_TIMEOUT_SECONDS")
        try:
            http_timeout = float(timeout_raw) if timeout_raw else cls.http_timeout
        except ValueError:
            raise RuntimeError("HTTP_TIMEOUT_SECONDS must be a number")

        return cls(
            hibp_api_key=_optional("HIBP_API_KEY"),
            leakcheck_api_key=_optional("LEAKCHECK_API_KEY"),
            openai_api_key=_optional("OPENAI_API_KEY"),
            openai_model=_optional("OPENAI_MODEL") or cls.openai_model,
            resend_api_key=_optional("RESEND_API_KEY"),
            contact_recipients=_csv("CONTACT_RECIPIENTS") or CONTACT_DEFAULT_RECIPIENTS,
            supabase_url=_optional("SUPABASE_URL"),
            supabase_service_role_key=(
                _optional("SUPABASE_SERVICE_ROLE_KEY") or _optional("SUPABASE_KEY")
            ),
            http_timeout=http_timeout,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
