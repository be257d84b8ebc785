"""Utilities for transforming resolver responses into AddressDetails records."""

import logging
import re
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from address_finder.models import AddressDetails

logger = logging.getLogger(__name__)

# First present, non-empty key wins.
NOMINATIM_FIELD_PREFERENCES: Dict[str, Sequence[str]] = {
    "road": ("road", "residential", "pedestrian", "path"),
    "neighbourhood": ("neighbourhood", "suburb"),
    "city": ("city", "town", "village", "county"),
    "district": ("city_district", "district", "borough"),
    "building": ("house_number", "building"),
    "state": ("state", "province"),
    "country": ("country",),
    "postcode": ("postcode",),
}

_DISPLAY_FIELDS = ("city", "neighbourhood", "road")


def _label_pattern(label: str) -> "re.Pattern[str]":
    # Horizontal whitespace only, so an empty value never swallows the next line.
    return re.compile(rf"{re.escape(label)}[^\S\n]*:[^\S\n]*(.*)", re.IGNORECASE)


def parse_labeled_text(text: str, labels: Mapping[str, str]) -> Dict[str, Optional[str]]:
    """Extract ``{field: value}`` from ``Label: value`` lines in *text*.

    *labels* maps field names to the label the service was asked to emit.
    Unmatched labels and empty values map to ``None``; this never raises.
    """
    fields: Dict[str, Optional[str]] = {}
    for field, label in labels.items():
        match = _label_pattern(label).search(text or "")
        value = match.group(1).strip() if match else ""
        fields[field] = value or None
    return fields


def parse_labeled_address(text: Optional[str], labels: Mapping[str, str]) -> AddressDetails:
    """Build an AddressDetails from a labeled-line response of the generative service."""
    raw = text or ""
    fields = parse_labeled_text(raw, labels)
    full_address = fields.pop("full_address", None)
    if full_address is None:
        full_address = raw.split("\n")[0]
        logger.debug("No full-address line in response; using first line instead.")

    return AddressDetails(
        full_address=full_address,
        formatted_display=raw,
        road=fields.get("road"),
        neighbourhood=fields.get("neighbourhood"),
        district=fields.get("district"),
        city=fields.get("city"),
        state=fields.get("state"),
        country=fields.get("country"),
        postcode=fields.get("postcode"),
        building=fields.get("building"),
        source="gemini",
    )


def join_display(parts: Iterable[Optional[str]], separator: str) -> str:
    """Join non-empty *parts* so no doubled, leading or trailing separator remains."""
    delimiter = separator.strip() or separator
    cleaned = []
    for part in parts:
        value = (part or "").strip().strip(delimiter).strip()
        if value:
            cleaned.append(value)
    return separator.join(cleaned)


def _first_present(address: Mapping[str, Any], keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = address.get(key)
        if value is None:
            continue
        value_str = str(value).strip()
        if value_str:
            return value_str
    return None


def nominatim_to_address(payload: Mapping[str, Any], separator: str) -> AddressDetails:
    """Map a Nominatim ``/reverse`` jsonv2 payload onto AddressDetails."""
    address = payload.get("address") or {}
    if not isinstance(address, Mapping):
        logger.warning("Nominatim address field is not an object: %r", type(address).__name__)
        address = {}

    fields = {field: _first_present(address, keys) for field, keys in NOMINATIM_FIELD_PREFERENCES.items()}
    formatted_display = join_display((fields[name] for name in _DISPLAY_FIELDS), separator)
    display_name = str(payload.get("display_name") or "").strip()

    return AddressDetails(
        full_address=display_name or formatted_display,
        formatted_display=formatted_display,
        source="nominatim",
        **fields,
    )
