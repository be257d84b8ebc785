"""Best-effort IP geolocation used when no device fix is reported."""

import logging
from typing import Any, Dict, Optional, Tuple

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()

IPINFO_URL = "https://ipinfo.io/json"
IPAPI_URL = "https://ipapi.co/json"


def _coerce_pair(latitude: Any, longitude: Any) -> Tuple[float, float]:
    try:
        return float(latitude), float(longitude)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"unusable coordinates: {latitude!r}, {longitude!r}") from exc


def _json_object(response: requests.Response) -> Dict[str, Any]:
    data = response.json()
    if not isinstance(data, dict):
        raise ValueError(f"unexpected payload type {type(data).__name__}")
    return data


def _from_ipinfo(timeout: float) -> Optional[Tuple[float, float]]:
    response = _SESSION.get(IPINFO_URL, timeout=timeout)
    response.raise_for_status()
    loc = _json_object(response).get("loc")
    if not loc:
        return None
    if not isinstance(loc, str) or loc.count(",") != 1:
        raise ValueError(f"malformed loc: {loc!r}")
    lat_s, lon_s = loc.split(",")
    return _coerce_pair(lat_s, lon_s)


def _from_ipapi(timeout: float) -> Tuple[float, float]:
    response = _SESSION.get(IPAPI_URL, timeout=timeout)
    response.raise_for_status()
    data = _json_object(response)
    return _coerce_pair(data.get("latitude"), data.get("longitude"))


def lookup(timeout: float = 4) -> Tuple[float, float]:
    """Return ``(latitude, longitude)`` for the caller's public IP.

    ipinfo.io is tried first; errors from the ipapi.co fallback propagate so
    the caller can classify them.
    """
    try:
        coords = _from_ipinfo(timeout)
        if coords is not None:
            return coords
        logger.warning("ipinfo.io response has no 'loc'; trying ipapi.co")
    except (requests.RequestException, ValueError) as exc:
        logger.warning("ipinfo.io lookup failed, trying ipapi.co: %s", exc)
    return _from_ipapi(timeout)
