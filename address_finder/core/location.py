"""Coordinate sources: where a resolution attempt gets its single location fix."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

import requests

from address_finder.core.errors import LocationError, LocationUnavailable, PermissionDenied
from address_finder.models import Coordinates
from address_finder.vendors import ip_location

logger = logging.getLogger(__name__)

# Platform geolocation error enum (GeolocationPositionError).
PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3


def classify_location_error(code: Any, message: Optional[str] = None) -> LocationError:
    """Map a platform geolocation error code onto PermissionDenied/LocationUnavailable.

    *message* is the platform's raw text; it is logged, never shown to users.
    """
    try:
        code_int = int(code)
    except (TypeError, ValueError):
        code_int = None
    logger.info("Platform reported location error code=%s message=%s", code, message)
    if code_int == PERMISSION_DENIED:
        return PermissionDenied(code=code_int)
    return LocationUnavailable(code=code_int)


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


class CoordinateSource(ABC):
    """Produces one Coordinates reading or raises a LocationError."""

    @abstractmethod
    def acquire(self) -> Coordinates:
        ...


class ReportedCoordinateSource(CoordinateSource):
    """A reading already obtained by a platform geolocation API.

    *reading* is either ``{"latitude", "longitude", "accuracy"?}`` or
    ``{"error": {"code": n, "message"?: str}}``.
    """

    def __init__(self, reading: Mapping[str, Any]):
        self._reading = dict(reading or {})

    @classmethod
    def from_values(
        cls, latitude: float, longitude: float, accuracy: Optional[float] = None
    ) -> ReportedCoordinateSource:
        return cls({"latitude": latitude, "longitude": longitude, "accuracy": accuracy})

    @classmethod
    def from_error(cls, code: int, message: Optional[str] = None) -> ReportedCoordinateSource:
        return cls({"error": {"code": code, "message": message}})

    def acquire(self) -> Coordinates:
        error = self._reading.get("error")
        if error:
            if not isinstance(error, Mapping):
                error = {"code": error}
            raise classify_location_error(error.get("code"), error.get("message"))

        latitude = _safe_float(self._reading.get("latitude"))
        longitude = _safe_float(self._reading.get("longitude"))
        if latitude is None or longitude is None:
            raise LocationUnavailable()
        try:
            return Coordinates(
                latitude=latitude,
                longitude=longitude,
                accuracy=_safe_float(self._reading.get("accuracy")),
            )
        except ValueError as exc:
            logger.warning("Rejected reported reading: %s", exc)
            raise LocationUnavailable() from exc


class IpCoordinateSource(CoordinateSource):
    """City-level location from the public IP, for hosts without a GPS fix."""

    def __init__(self, timeout: float = 4):
        self._timeout = timeout

    def acquire(self) -> Coordinates:
        try:
            latitude, longitude = ip_location.lookup(timeout=self._timeout)
            return Coordinates(latitude=latitude, longitude=longitude)
        except (requests.RequestException, ValueError) as exc:
            logger.error("IP geolocation failed: %s", exc)
            raise LocationUnavailable() from exc
