"""Application configuration helpers.

Environment variables are the only way to provide credentials:
`GEMINI_API_KEY` must never be hardcoded because it is a billable key.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from address_finder.core import messages

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_NOMINATIM_URL = "https://nominatim.openstreetmap.org"
DEFAULT_USER_AGENT = "address-finder/0.1"


class ConfigError(RuntimeError):
    """Raised when configuration values are present but unusable."""


@dataclass(frozen=True)
class Settings:
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_GEMINI_MODEL
    nominatim_url: str = DEFAULT_NOMINATIM_URL
    nominatim_user_agent: str = DEFAULT_USER_AGENT
    locale: str = messages.DEFAULT_LOCALE
    request_timeout: float = 10.0
    server_port: int = 8080


def _get_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be numeric, got {raw!r}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    gemini_api_key = os.getenv("GEMINI_API_KEY", "").strip()
    gemini_model = os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL
    nominatim_url = (os.getenv("NOMINATIM_URL") or DEFAULT_NOMINATIM_URL).rstrip("/")
    nominatim_user_agent = os.getenv("NOMINATIM_USER_AGENT") or DEFAULT_USER_AGENT
    locale_raw = (os.getenv("ADDRESS_LOCALE") or messages.DEFAULT_LOCALE).strip().lower()
    request_timeout = _get_number("REQUEST_TIMEOUT", "10", float)
    server_port = _get_number("SERVER_PORT", os.getenv("PORT") or "8080", int)

    locale = messages.resolve_locale(locale_raw)
    if locale != locale_raw:
        logger.warning("ADDRESS_LOCALE=%s is not supported; falling back to %s.", locale_raw, locale)
    if not gemini_api_key:
        logger.warning("GEMINI_API_KEY is not configured; addresses will come from Nominatim only.")

    return Settings(
        gemini_api_key=gemini_api_key,
        gemini_model=gemini_model,
        nominatim_url=nominatim_url,
        nominatim_user_agent=nominatim_user_agent,
        locale=locale,
        request_timeout=request_timeout,
        server_port=server_port,
    )
