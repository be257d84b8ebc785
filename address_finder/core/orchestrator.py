"""Resolution orchestrator: coordinates, then primary resolver, then fallback.

The orchestrator is the only stateful piece of the pipeline. It exposes the
current state, the latest coordinates, address and error message for a
presentation layer, plus the copy and share actions that layer triggers.

Every ``start()`` takes a new attempt token. Stages that finish under a
token that is no longer current leave the observable state alone, so a
newer attempt always wins over a stale one still in flight.
"""

from __future__ import annotations

import itertools
import logging
import threading
from enum import Enum
from typing import Callable, Optional

from address_finder.core import messages
from address_finder.core.errors import AddressFinderError
from address_finder.core.location import CoordinateSource
from address_finder.core.resolvers import AddressResolver
from address_finder.models import AddressDetails, Coordinates, ResolutionOutcome, ShareData

logger = logging.getLogger(__name__)

Clipboard = Callable[[str], None]
ShareCapability = Callable[[ShareData], None]


class ResolutionState(str, Enum):
    IDLE = "idle"
    ACQUIRING_COORDINATES = "acquiring_coordinates"
    RESOLVING_ADDRESS = "resolving_address"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_STATES = frozenset({ResolutionState.SUCCEEDED, ResolutionState.FAILED})


class ResolutionOrchestrator:
    def __init__(
        self,
        source: CoordinateSource,
        primary: AddressResolver,
        fallback: AddressResolver,
        *,
        locale: Optional[str] = None,
    ):
        self._source = source
        self._primary = primary
        self._fallback = fallback
        self._locale = messages.resolve_locale(locale)
        self._tokens = itertools.count(1)
        self._current_token = 0
        self._lock = threading.Lock()

        self.state = ResolutionState.IDLE
        self.coordinates: Optional[Coordinates] = None
        self.address: Optional[AddressDetails] = None
        self.error: Optional[Exception] = None
        self.error_message: Optional[str] = None

    @property
    def is_busy(self) -> bool:
        return self.state in (ResolutionState.ACQUIRING_COORDINATES, ResolutionState.RESOLVING_ADDRESS)

    # ── Resolution ────────────────────────────────────────────────

    def start(self) -> ResolutionOutcome:
        """Run one full resolution attempt, superseding any attempt in flight."""
        with self._lock:
            token = next(self._tokens)
            self._current_token = token
        self._apply(
            token,
            state=ResolutionState.ACQUIRING_COORDINATES,
            coordinates=None,
            address=None,
            error=None,
            error_message=None,
        )

        try:
            coords = self._source.acquire()
        except Exception as exc:  # noqa: BLE001 - classified in _fail
            return self._fail(token, exc)

        self._apply(token, state=ResolutionState.RESOLVING_ADDRESS, coordinates=coords)

        try:
            address = self._primary.resolve(coords)
        except Exception as primary_exc:  # noqa: BLE001 - any primary failure triggers the fallback
            logger.warning(
                "Primary resolver %s failed, falling back to %s: %s",
                self._primary.name,
                self._fallback.name,
                primary_exc,
            )
            try:
                address = self._fallback.resolve(coords)
            except Exception as exc:  # noqa: BLE001 - classified in _fail
                return self._fail(token, exc)

        self._apply(token, state=ResolutionState.SUCCEEDED, address=address)
        return ResolutionOutcome.success(address)

    def _fail(self, token: int, exc: Exception) -> ResolutionOutcome:
        if isinstance(exc, AddressFinderError):
            logger.error("Resolution failed (%s): %s", exc.kind, exc)
            kind = exc.kind
        else:
            logger.exception("Unexpected error during resolution: %s", exc)
            kind = "unexpected"
        message = messages.get_message(kind, self._locale)
        self._apply(token, state=ResolutionState.FAILED, error=exc, error_message=message)
        return ResolutionOutcome.failure(exc, message)

    def _apply(self, token: int, **fields) -> bool:
        # Token check and writes are one atomic step.
        with self._lock:
            if token != self._current_token:
                logger.info("Discarding result of superseded attempt %s (current=%s)", token, self._current_token)
                return False
            for name, value in fields.items():
                setattr(self, name, value)
        return True

    # ── User actions ──────────────────────────────────────────────

    def summary_text(self) -> Optional[str]:
        if self.state is not ResolutionState.SUCCEEDED or self.address is None or self.coordinates is None:
            return None
        return messages.get_message("summary", self._locale).format(
            full_address=self.address.full_address,
            postcode=self.address.postcode or messages.get_message("postcode_unknown", self._locale),
            latitude=self.coordinates.latitude,
            longitude=self.coordinates.longitude,
        )

    def copy_summary(self, clipboard: Optional[Clipboard] = None) -> Optional[str]:
        """Hand the formatted summary to *clipboard* and return it."""
        text = self.summary_text()
        if text is None:
            return None
        if clipboard is not None:
            clipboard(text)
        return text

    def share_data(self) -> Optional[ShareData]:
        if self.state is not ResolutionState.SUCCEEDED or self.address is None or self.coordinates is None:
            return None
        return ShareData(
            title=messages.get_message("share_title", self._locale),
            text=messages.get_message("share_text", self._locale).format(
                full_address=self.address.full_address,
                postcode=self.address.postcode or "",
            ),
            url=self.coordinates.map_link(),
        )

    def share(self, share: Optional[ShareCapability] = None, clipboard: Optional[Clipboard] = None) -> bool:
        """Share via the platform capability, or copy the summary when there is none."""
        data = self.share_data()
        if data is None:
            return False
        if share is None:
            return self.copy_summary(clipboard) is not None
        try:
            share(data)
        except Exception as exc:  # noqa: BLE001 - a dismissed share sheet is not a resolution error
            logger.error("Share capability failed: %s", exc)
            return False
        return True
