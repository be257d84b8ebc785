"""Core data models shared by the address resolution pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

MAP_LINK_TEMPLATE = "https://www.google.com/maps?q={latitude},{longitude}"


@dataclass(frozen=True, slots=True)
class Coordinates:
    """A single location fix as reported by the device."""

    latitude: float
    longitude: float
    accuracy: Optional[float] = None

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")
        if self.accuracy is not None and self.accuracy < 0:
            raise ValueError(f"accuracy must be non-negative: {self.accuracy}")

    def map_link(self) -> str:
        return MAP_LINK_TEMPLATE.format(latitude=self.latitude, longitude=self.longitude)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class AddressDetails:
    """Normalized address record produced by either resolver.

    ``full_address`` and ``formatted_display`` are always strings; every
    other field is best-effort and ``None`` when the upstream omitted it.
    """

    full_address: str
    formatted_display: str
    road: Optional[str] = None
    neighbourhood: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postcode: Optional[str] = None
    building: Optional[str] = None
    source: str = "unknown"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class ResolutionOutcome:
    """Result of one resolution attempt: an address or a classified error."""

    address: Optional[AddressDetails] = None
    error: Optional[Exception] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, address: AddressDetails) -> "ResolutionOutcome":
        return cls(address=address)

    @classmethod
    def failure(cls, error: Exception, message: str) -> "ResolutionOutcome":
        return cls(error=error, message=message)

    @property
    def ok(self) -> bool:
        return self.error is None and self.address is not None


@dataclass(frozen=True, slots=True)
class ShareData:
    """Payload handed to a platform share capability."""

    title: str
    text: str
    url: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
