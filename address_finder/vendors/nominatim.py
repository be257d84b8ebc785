"""Client utilities for the Nominatim reverse-geocoding API."""

import logging
from typing import Any, Dict

import requests

from address_finder.core.errors import UpstreamError

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_SERVICE = "nominatim"


def reverse(
    latitude: float,
    longitude: float,
    *,
    base_url: str,
    user_agent: str,
    language: str = "fa",
    timeout: float = 10,
) -> Dict[str, Any]:
    """Return the raw jsonv2 payload for a coordinate pair."""
    params = {
        "format": "jsonv2",
        "lat": latitude,
        "lon": longitude,
        "accept-language": language,
    }
    # Nominatim usage policy requires an identifying User-Agent.
    headers = {"User-Agent": user_agent, "Accept": "application/json"}

    logger.info("Calling Nominatim reverse for lat=%s lon=%s", latitude, longitude)
    try:
        response = _SESSION.get(f"{base_url}/reverse", params=params, headers=headers, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as exc:
        logger.error("Nominatim request failed: %s", exc)
        raise UpstreamError(_SERVICE, str(exc)) from exc
    except ValueError as exc:
        logger.error("Nominatim returned a non-JSON body: %s", exc)
        raise UpstreamError(_SERVICE, "response body is not JSON") from exc

    if not isinstance(payload, dict):
        raise UpstreamError(_SERVICE, f"unexpected payload type {type(payload).__name__}")
    if "error" in payload:
        logger.error("Nominatim reverse failed: error=%s", payload.get("error"))
        raise UpstreamError(_SERVICE, str(payload.get("error")))
    return payload
