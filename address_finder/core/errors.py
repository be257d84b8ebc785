"""Exception hierarchy for the address resolution pipeline."""

from __future__ import annotations

from typing import Optional

from address_finder.core import messages


class AddressFinderError(Exception):
    """Base exception for all pipeline errors.

    ``kind`` is the message-table key used to render the error for users.
    """

    kind = "unexpected"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or messages.get_message(self.kind))


class LocationError(AddressFinderError):
    """The coordinate source could not produce a fix."""

    kind = "location_unavailable"

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        self.code = code
        super().__init__(message)


class PermissionDenied(LocationError):
    """The user or the OS refused access to the location capability."""

    kind = "permission_denied"


class LocationUnavailable(LocationError):
    """No fix within the platform deadline, or no location capability at all."""

    kind = "location_unavailable"


class UpstreamError(AddressFinderError):
    """An address resolver failed: network, auth, bad status or bad payload."""

    kind = "upstream_error"

    def __init__(self, service: str, detail: str):
        self.service = service
        self.detail = detail
        super().__init__(f"{service} request failed: {detail}")
