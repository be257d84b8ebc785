"""Address resolvers: coordinates in, AddressDetails out, UpstreamError on failure."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

from address_finder.core import messages
from address_finder.core.config import Settings, get_settings
from address_finder.etl import transform
from address_finder.models import AddressDetails, Coordinates
from address_finder.vendors import gemini, nominatim

logger = logging.getLogger(__name__)


class AddressResolver(ABC):
    name = "resolver"

    @abstractmethod
    def resolve(self, coords: Coordinates) -> AddressDetails:
        ...


class PrimaryResolver(AddressResolver):
    """Grounded generative lookup; tolerant of partially conforming answers."""

    name = "gemini"

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    def resolve(self, coords: Coordinates) -> AddressDetails:
        locale = self._settings.locale
        prompt = messages.build_prompt(coords.latitude, coords.longitude, locale)
        text = gemini.generate_grounded_text(
            prompt,
            coords.latitude,
            coords.longitude,
            api_key=self._settings.gemini_api_key,
            model=self._settings.gemini_model,
            timeout=self._settings.request_timeout,
        )
        address = transform.parse_labeled_address(text, messages.field_labels(locale))
        logger.info("Gemini resolved address postcode=%s city=%s", address.postcode, address.city)
        return address


class FallbackResolver(AddressResolver):
    """Reverse geocoding through Nominatim."""

    name = "nominatim"

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    def resolve(self, coords: Coordinates) -> AddressDetails:
        locale = self._settings.locale
        payload = nominatim.reverse(
            coords.latitude,
            coords.longitude,
            base_url=self._settings.nominatim_url,
            user_agent=self._settings.nominatim_user_agent,
            language=locale,
            timeout=self._settings.request_timeout,
        )
        address = transform.nominatim_to_address(payload, messages.separator(locale))
        logger.info("Nominatim resolved address city=%s road=%s", address.city, address.road)
        return address
